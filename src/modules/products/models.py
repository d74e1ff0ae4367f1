"""Product model with a name-derived unique slug and an optional image.

Invariants:
- ``slug`` always follows ``name`` (re-derived on every save).
- ``slug`` is unique.
- ``image`` holds the storage-relative path of at most one file.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.validators import MinValueValidator
from django.db import models

from modules.categories.models import Category
from modules.core.models import BaseModel
from modules.core.utils import slugify_name

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Product catalogue entry.

    Category links are a plain many-to-many: deleting a product drops the
    link rows only, never the categories themselves.
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    image = models.CharField(max_length=255, null=True, blank=True, default=None)
    categories = models.ManyToManyField(
        Category, related_name="products", blank=True
    )

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.name:
            self.slug = slugify_name(self.name)
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=self.id,
                slug=self.slug,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"
