"""Small pure helpers shared across modules."""

from __future__ import annotations

import math
import re

from django.utils.text import slugify

# Plain decimal notation only: no digit-group underscores, no padding.
_NUMBER = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INTEGER = re.compile(r"[0-9]+")


def slugify_name(name: str) -> str:
    """Derive the URL-safe slug for a display name.

    Deterministic: the same ``name`` always yields the same slug.
    """
    return slugify(name)


def is_numeric_identifier(value: str) -> bool:
    """True when ``value`` is written entirely as a finite decimal number."""
    if not isinstance(value, str) or not _NUMBER.fullmatch(value):
        return False
    return math.isfinite(float(value))


def parse_integer_identifier(value: str | None) -> int | None:
    """Integer for an all-digit ``value``; ``None`` for anything else."""
    if not isinstance(value, str) or not _INTEGER.fullmatch(value):
        return None
    return int(value)
