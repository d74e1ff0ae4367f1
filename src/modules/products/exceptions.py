"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Iterable

from modules.core.exceptions import RecordNotFoundError, UniqueConstraintError


class ProductAlreadyExists(UniqueConstraintError):
    """Another product already owns a unique value (normally the slug)."""


class ProductNotFound(RecordNotFoundError):
    """The requested product does not exist."""


class CategoryNotFound(Exception):
    """One or more category ids given for a product do not exist."""

    def __init__(self, ids: Iterable[int]) -> None:
        self.ids = tuple(sorted(ids))
        super().__init__(
            f"Categories not found: {', '.join(str(i) for i in self.ids)}."
        )
