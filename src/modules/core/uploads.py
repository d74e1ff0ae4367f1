"""Upload storage helpers.

Uploaded files are written through a Django ``Storage`` under a configured
directory with a generated name; the storage-relative path is what gets
persisted on the owning record.
"""

from __future__ import annotations

import posixpath
import uuid
from pathlib import PurePath
from typing import Optional

import structlog
from django.core.files import File
from django.core.files.storage import Storage

logger = structlog.get_logger(__name__)


def generate_upload_name(original_name: Optional[str]) -> str:
    """Random hex filename that keeps the original (lower-cased) extension."""
    suffix = PurePath(original_name or "").suffix.lower()
    return f"{uuid.uuid4().hex}{suffix}"


def store_upload(storage: Storage, upload: File, directory: str) -> str:
    """Write ``upload`` into ``directory`` and return the stored path."""
    name = posixpath.join(directory, generate_upload_name(upload.name))
    stored = storage.save(name, upload)
    logger.info("upload.stored", path=stored, size=upload.size)
    return stored


def force_remove(storage: Storage, path: Optional[str]) -> bool:
    """Delete ``path`` if present; a missing file is not an error.

    Returns ``True`` when a delete was issued.
    """
    if not path:
        return False
    try:
        storage.delete(path)
    except FileNotFoundError:
        logger.debug("upload.already_absent", path=path)
        return False
    logger.info("upload.removed", path=path)
    return True
