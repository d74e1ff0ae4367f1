from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.categories.models import Category
from modules.core.utils import slugify_name
from modules.products.models import Product


class Command(BaseCommand):
    help = "Seed database with demo categories and products (no images)."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        categories = self._seed_categories()
        products = self._seed_products(categories)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"categories={len(categories)}, "
                f"products={len(products)}"
            )
        )

    def _seed_categories(self) -> dict[str, Category]:
        self.stdout.write("Creating categories...")
        categories: dict[str, Category] = {}
        for name in ("Kitchen", "Office", "Electronics", "Gifts"):
            category, _ = Category.objects.get_or_create(name=name)
            categories[name] = category
        self.stdout.write(self.style.SUCCESS("Creating categories... Done!"))
        return categories

    def _seed_products(self, categories: dict[str, Category]) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("Red Mug", Decimal("12.90"), ["Kitchen", "Gifts"]),
            ("Blue Mug", Decimal("12.90"), ["Kitchen", "Gifts"]),
            ("French Press", Decimal("39.00"), ["Kitchen"]),
            ("Desk Lamp", Decimal("59.90"), ["Office", "Electronics"]),
            ("Notebook A5", Decimal("9.90"), ["Office"]),
            ("Mechanical Keyboard", Decimal("129.00"), ["Office", "Electronics"]),
            ("USB-C Hub", Decimal("45.50"), ["Electronics"]),
            ("Gift Card", Decimal("25.00"), ["Gifts"]),
        ]
        for name, price, category_names in catalog:
            product, created = Product.objects.get_or_create(
                slug=slugify_name(name),
                defaults={"name": name, "price": price},
            )
            if created:
                product.categories.set(categories[c] for c in category_names)
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products
