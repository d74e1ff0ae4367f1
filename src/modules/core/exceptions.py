"""Persistence-level domain exceptions.

Raised by repositories (via the translation table in
``modules.core.repositories.errors``) so that services and views never
depend on ORM-specific error types.
"""

from __future__ import annotations

from typing import Iterable


class RecordNotFoundError(Exception):
    """The record targeted by a read or write does not exist."""


class UniqueConstraintError(Exception):
    """A write would duplicate a value that must stay unique.

    ``fields`` holds the names of the conflicting unique fields.
    """

    def __init__(self, fields: Iterable[str], message: str | None = None) -> None:
        self.fields = tuple(fields)
        super().__init__(
            message or f"Unique constraint failed on the fields: {', '.join(self.fields)}"
        )
