"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.core.utils import slugify_name

NULLABLE_FIELDS = frozenset({"price"})


def _validate_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty.")
    if not slugify_name(v):
        raise ValueError("Name must contain at least one letter or digit.")
    return v


def _validate_price(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v <= 0:
        raise ValueError("Price must be greater than zero.")
    return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    ``slug`` and ``image`` are never accepted from the client: the slug is
    derived from ``name`` and the image path comes from the stored upload.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    category_ids: Tuple[int, ...] = ()

    @field_validator("name")
    @classmethod
    def name_must_produce_slug(cls, v: str) -> str:
        return _validate_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _validate_price(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``price`` supplied as ``None`` clears the stored price.
    ``category_ids`` of ``None`` leaves links untouched, a tuple replaces them.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    category_ids: Optional[Tuple[int, ...]] = None

    @field_validator("name")
    @classmethod
    def name_must_produce_slug(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _validate_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _validate_price(v)

    def changed_fields(self) -> dict:
        """Supplied scalar fields, keyed by model attribute."""
        supplied = self.model_dump(exclude_unset=True, exclude={"category_ids"})
        return {
            name: value
            for name, value in supplied.items()
            if value is not None or name in NULLABLE_FIELDS
        }
