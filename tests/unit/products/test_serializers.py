"""Unit tests for the Product DRF serializer.

Covers:
- camelCase timestamp keys and field set.
- Nested categories.
- Null price and image.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product
from modules.products.serializers import ProductSerializer

pytestmark = pytest.mark.unit


class TestProductSerializer:
    def test_field_set(self):
        product = Product.objects.create(name="Red Mug", price=Decimal("12.90"))
        data = ProductSerializer(product).data
        assert set(data) == {
            "id",
            "name",
            "slug",
            "description",
            "price",
            "image",
            "categories",
            "createdAt",
            "updatedAt",
        }

    def test_values(self):
        product = Product.objects.create(
            name="Red Mug",
            price=Decimal("12.90"),
            image="uploads/products/abc.png",
        )
        data = ProductSerializer(product).data
        assert data["id"] == product.id
        assert data["slug"] == "red-mug"
        assert data["price"] == "12.90"
        assert data["image"] == "uploads/products/abc.png"
        assert data["createdAt"] is not None

    def test_nested_categories(self, categories):
        product = Product.objects.create(name="Red Mug")
        product.categories.set(categories)
        data = ProductSerializer(product).data
        assert sorted(c["slug"] for c in data["categories"]) == ["gifts", "kitchen"]
        assert set(data["categories"][0]) == {"id", "name", "slug"}

    def test_null_price_and_image(self):
        product = Product.objects.create(name="Plain")
        data = ProductSerializer(product).data
        assert data["price"] is None
        assert data["image"] is None
        assert data["categories"] == []

    def test_all_fields_read_only(self):
        serializer = ProductSerializer(data={"name": "X"})
        assert serializer.is_valid()
        assert serializer.validated_data == {}
