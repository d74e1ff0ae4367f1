"""Product repository interface.

Extends ``IRepository[Product]`` with the slug look-up and the
create/update writes used by ``ProductService``.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Writes raise ``UniqueConstraintError`` / ``RecordNotFoundError`` from
    ``modules.core.exceptions`` and ``CategoryNotFound`` for unknown links.
    """

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional["Product"]:
        """Retrieve a product by slug."""

    @abstractmethod
    def create(
        self, fields: Dict[str, Any], category_ids: Iterable[int] = ()
    ) -> "Product":
        """Insert a product and link it to ``category_ids``."""

    @abstractmethod
    def update(
        self,
        id: int,
        fields: Dict[str, Any],
        category_ids: Optional[Iterable[int]] = None,
    ) -> "Product":
        """Apply ``fields`` to product ``id``; replace links when given."""
