"""Category model; products link to categories many-to-many."""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.core.utils import slugify_name


class Category(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    slug = models.SlugField(max_length=140, unique=True, blank=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name_plural = "categories"

    def save(self, *args, **kwargs) -> None:
        if not self.slug:
            self.slug = slugify_name(self.name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name
