from pathlib import Path

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from modules.categories.models import Category

IMAGE_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path) -> Path:
    """Point MEDIA_ROOT (and so ``default_storage``) at a per-test directory."""
    root = tmp_path / "media"
    root.mkdir()
    settings.MEDIA_ROOT = str(root)
    return root


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_image():
    """Factory for small in-memory image uploads."""

    def _make(name: str = "photo.png") -> SimpleUploadedFile:
        return SimpleUploadedFile(name, IMAGE_BYTES, content_type="image/png")

    return _make


@pytest.fixture()
def categories():
    """Two persisted categories."""
    return [
        Category.objects.create(name="Kitchen"),
        Category.objects.create(name="Gifts"),
    ]
