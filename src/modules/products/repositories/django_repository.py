"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.  Reads
follow the Null Object pattern (``None`` for a missing product); writes
run inside ``translate_persistence_errors`` so ORM failures surface as
persistence domain errors.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog

from modules.categories.models import Category
from modules.core.repositories.errors import translate_persistence_errors
from modules.products.exceptions import CategoryNotFound
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def _queryset(self):
        return Product.objects.prefetch_related("categories").order_by(
            "-created_at", "-id"
        )

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or out-of-range IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, OverflowError):
            return None

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return self._queryset().filter(slug=slug).first()

    def count(self) -> int:
        return Product.objects.count()

    def list(self, skip: int = 0, take: Optional[int] = None) -> List[Product]:
        queryset = self._queryset()
        end = skip + take if take is not None else None
        return list(queryset[skip:end])

    def create(
        self, fields: Dict[str, Any], category_ids: Iterable[int] = ()
    ) -> Product:
        product = Product(**fields)
        with translate_persistence_errors(product):
            product.save()
            product.categories.set(self._resolve_categories(category_ids))
        logger.info("product.saved", product_id=product.id, slug=product.slug)
        return product

    def update(
        self,
        id: int,
        fields: Dict[str, Any],
        category_ids: Optional[Iterable[int]] = None,
    ) -> Product:
        with translate_persistence_errors():
            product = Product.objects.get(pk=id)
        for name, value in fields.items():
            setattr(product, name, value)
        with translate_persistence_errors(product):
            product.save()
            if category_ids is not None:
                product.categories.set(self._resolve_categories(category_ids))
        logger.info("product.saved", product_id=product.id, slug=product.slug)
        return product

    def delete(self, id: int) -> Product:
        """Hard-delete a product; its category link rows go with it."""
        with translate_persistence_errors():
            product = Product.objects.get(pk=id)
            product.delete()
        product.id = id
        return product

    def _resolve_categories(self, ids: Iterable[int]) -> List[Category]:
        wanted = set(ids)
        if not wanted:
            return []
        categories = list(Category.objects.filter(id__in=wanted))
        missing = wanted - {category.id for category in categories}
        if missing:
            raise CategoryNotFound(missing)
        return categories
