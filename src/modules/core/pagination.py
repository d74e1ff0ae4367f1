"""Offset pagination primitives.

- ``PageQuery``: validated ``page`` / ``limit`` query parameters.
- ``PageMeta``: pagination metadata returned beside a page of items.
- ``build_page_meta``: pure computation of ``PageMeta``.
"""

from __future__ import annotations

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Largest row offset a database accepts (signed 64-bit).
MAX_ROW_OFFSET = 2**63 - 1


class PageQuery(BaseModel):
    """Immutable page request; ``page`` and ``limit`` are 1-based and positive."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)

    @model_validator(mode="after")
    def window_fits_row_offset(self) -> "PageQuery":
        if self.page * self.limit > MAX_ROW_OFFSET:
            raise ValueError("page and limit are too large.")
        return self

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def take(self) -> int:
        return self.limit


class PageMeta(BaseModel):
    """Pagination metadata, serialised with camelCase keys."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    page: int
    limit: int
    total_count: int
    previous_page: Optional[int] = None
    next_page: Optional[int] = None

    def to_response(self) -> dict:
        """Wire shape: absent neighbours are omitted rather than null."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Page(BaseModel, Generic[T]):
    """A slice of items together with its ``PageMeta``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: List[T]
    meta: PageMeta


def build_page_meta(page: int, limit: int, total_count: int) -> PageMeta:
    """Compute neighbour pages for ``page`` of ``limit`` items out of ``total_count``."""
    return PageMeta(
        page=page,
        limit=limit,
        total_count=total_count,
        previous_page=page - 1 if page > 1 else None,
        next_page=page + 1 if math.ceil(total_count / limit) > page else None,
    )
