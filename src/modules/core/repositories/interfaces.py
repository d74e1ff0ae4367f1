"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def count(self) -> int:
        """Count every stored entity."""

    @abstractmethod
    def list(self, skip: int = 0, take: Optional[int] = None) -> Sequence[T]:
        """List entities in their default order, sliced by ``skip``/``take``."""

    @abstractmethod
    def delete(self, id: int) -> T:
        """Remove an entity by ID and return it.

        Raises ``RecordNotFoundError`` when nothing matches.
        """
