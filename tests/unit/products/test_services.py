"""Unit tests for ProductService.

The repository is a ``MagicMock``; images go to a real
``FileSystemStorage`` under ``tmp_path`` so file lifecycle is observable.

Covers:
- list_products: skip/take, unfiltered count, meta.
- find_by_id_or_slug / get_product: numeric vs slug dispatch.
- create_product: slug derivation, stored image, compensation on failure.
- update_product: conditional slug, image replaced only after the write.
- delete_product: image removed after the row, not-found mapping.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from modules.core.exceptions import RecordNotFoundError, UniqueConstraintError
from modules.core.pagination import PageQuery
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    CategoryNotFound,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product
from modules.products.services import ProductService

pytestmark = pytest.mark.unit

UPLOAD_DIR = "uploads/products"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def storage(tmp_path):
    return FileSystemStorage(location=str(tmp_path / "files"))


@pytest.fixture()
def service(mock_repo, storage):
    return ProductService(repository=mock_repo, storage=storage, upload_dir=UPLOAD_DIR)


def _upload(name: str = "mug.png") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, b"image-bytes", content_type="image/png")


def _stored_files(storage) -> list[str]:
    if not storage.exists(UPLOAD_DIR):
        return []
    return storage.listdir(UPLOAD_DIR)[1]


def _echo_create(fields, category_ids=()):
    return Product(id=1, **fields)


# ===========================================================================
# list_products
# ===========================================================================


class TestListProducts:
    def test_pages_through_repository(self, service, mock_repo):
        products = [Product(id=i, name=f"P{i}", slug=f"p{i}") for i in range(10)]
        mock_repo.count.return_value = 25
        mock_repo.list.return_value = products

        page = service.list_products(PageQuery(page=2, limit=10))

        mock_repo.list.assert_called_once_with(skip=10, take=10)
        assert page.items == products
        assert page.meta.total_count == 25
        assert page.meta.previous_page == 1
        assert page.meta.next_page == 3

    def test_defaults_to_first_page_of_ten(self, service, mock_repo):
        mock_repo.count.return_value = 0
        mock_repo.list.return_value = []

        page = service.list_products()

        mock_repo.list.assert_called_once_with(skip=0, take=10)
        assert page.items == []
        assert page.meta.previous_page is None
        assert page.meta.next_page is None


# ===========================================================================
# find_by_id_or_slug / get_product
# ===========================================================================


class TestLookup:
    @pytest.mark.parametrize(("value", "expected_id"), [("42", 42), ("1e2", 100), ("7.0", 7)])
    def test_numeric_values_use_id(self, service, mock_repo, value, expected_id):
        service.find_by_id_or_slug(value)

        mock_repo.get_by_id.assert_called_once_with(expected_id)
        mock_repo.get_by_slug.assert_not_called()

    @pytest.mark.parametrize("value", ["red-mug", "nan", "12abc"])
    def test_other_values_use_slug(self, service, mock_repo, value):
        service.find_by_id_or_slug(value)

        mock_repo.get_by_slug.assert_called_once_with(value)
        mock_repo.get_by_id.assert_not_called()

    def test_fractional_number_matches_nothing(self, service, mock_repo):
        assert service.find_by_id_or_slug("1.5") is None
        mock_repo.get_by_id.assert_not_called()
        mock_repo.get_by_slug.assert_not_called()

    def test_get_product_success(self, service, mock_repo):
        product = Product(id=3, name="Red Mug", slug="red-mug")
        mock_repo.get_by_slug.return_value = product

        assert service.get_product("red-mug") is product

    def test_get_product_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.get_product("999")


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_success(self, service, mock_repo, storage):
        mock_repo.create.side_effect = _echo_create
        dto = CreateProductDTO(name="Red Mug", category_ids=[1, 2])

        product = service.create_product(dto, _upload())

        fields = mock_repo.create.call_args.args[0]
        assert fields["slug"] == "red-mug"
        assert fields["name"] == "Red Mug"
        assert mock_repo.create.call_args.kwargs["category_ids"] == (1, 2)
        assert product.image.startswith(f"{UPLOAD_DIR}/")
        assert product.image.endswith(".png")
        assert storage.exists(product.image)

    def test_without_image(self, service, mock_repo, storage):
        mock_repo.create.side_effect = _echo_create

        product = service.create_product(CreateProductDTO(name="Red Mug"), None)

        assert product.image is None
        assert _stored_files(storage) == []

    def test_duplicate_slug_raises_and_discards_upload(self, service, mock_repo, storage):
        mock_repo.create.side_effect = UniqueConstraintError(["slug"])

        with pytest.raises(ProductAlreadyExists) as excinfo:
            service.create_product(CreateProductDTO(name="Red Mug"), _upload())

        assert excinfo.value.fields == ("slug",)
        assert _stored_files(storage) == []

    def test_unknown_category_discards_upload(self, service, mock_repo, storage):
        mock_repo.create.side_effect = CategoryNotFound([9])

        with pytest.raises(CategoryNotFound):
            service.create_product(CreateProductDTO(name="Red Mug"), _upload())

        assert _stored_files(storage) == []

    def test_unexpected_error_propagates(self, service, mock_repo, storage):
        mock_repo.create.side_effect = RuntimeError("database is down")

        with pytest.raises(RuntimeError, match="database is down"):
            service.create_product(CreateProductDTO(name="Red Mug"), _upload())

        assert _stored_files(storage) == []


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    @pytest.fixture()
    def existing(self, mock_repo, storage):
        old_path = storage.save(f"{UPLOAD_DIR}/old.png", _upload("old.png"))
        product = Product(id=5, name="Red Mug", slug="red-mug", image=old_path)
        mock_repo.get_by_id.return_value = product
        mock_repo.update.side_effect = lambda id, fields, category_ids=None: Product(
            id=id, **{"name": product.name, "slug": product.slug, "image": product.image, **fields}
        )
        return product

    def test_name_change_rederives_slug(self, service, mock_repo, existing):
        product = service.update_product(5, UpdateProductDTO(name="Blue Mug"))

        fields = mock_repo.update.call_args.args[1]
        assert fields == {"name": "Blue Mug", "slug": "blue-mug"}
        assert product.slug == "blue-mug"

    def test_without_name_keeps_slug(self, service, mock_repo, existing):
        product = service.update_product(5, UpdateProductDTO(description="Ceramic"))

        fields = mock_repo.update.call_args.args[1]
        assert "slug" not in fields
        assert product.slug == "red-mug"

    def test_category_ids_forwarded(self, service, mock_repo, existing):
        service.update_product(5, UpdateProductDTO(category_ids=[4]))

        assert mock_repo.update.call_args.kwargs["category_ids"] == (4,)

    def test_new_image_replaces_old_after_write(self, service, mock_repo, storage, existing):
        old_path = existing.image

        product = service.update_product(5, UpdateProductDTO(), _upload("new.png"))

        assert product.image != old_path
        assert storage.exists(product.image)
        assert not storage.exists(old_path)

    def test_no_image_keeps_old_file(self, service, mock_repo, storage, existing):
        service.update_product(5, UpdateProductDTO(name="Blue Mug"))

        assert "image" not in mock_repo.update.call_args.args[1]
        assert storage.exists(existing.image)

    def test_old_image_already_missing_is_tolerated(self, service, storage, existing):
        storage.delete(existing.image)

        product = service.update_product(5, UpdateProductDTO(), _upload("new.png"))

        assert storage.exists(product.image)

    def test_not_found_before_write(self, service, mock_repo, storage):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.update_product(5, UpdateProductDTO(name="Ghost"), _upload())

        mock_repo.update.assert_not_called()
        assert _stored_files(storage) == []

    def test_failed_write_keeps_old_image(self, service, mock_repo, storage, existing):
        mock_repo.update.side_effect = UniqueConstraintError(["slug"])

        with pytest.raises(ProductAlreadyExists):
            service.update_product(5, UpdateProductDTO(name="Taken"), _upload("new.png"))

        assert _stored_files(storage) == ["old.png"]

    def test_row_vanishing_during_write_maps_to_not_found(
        self, service, mock_repo, storage, existing
    ):
        mock_repo.update.side_effect = RecordNotFoundError("gone")

        with pytest.raises(ProductNotFound):
            service.update_product(5, UpdateProductDTO(), _upload("new.png"))

        assert _stored_files(storage) == ["old.png"]


# ===========================================================================
# delete_product
# ===========================================================================


class TestDeleteProduct:
    def test_success_removes_image(self, service, mock_repo, storage):
        path = storage.save(f"{UPLOAD_DIR}/mug.png", _upload())
        mock_repo.delete.return_value = Product(id=5, name="Red Mug", image=path)

        service.delete_product(5)

        mock_repo.delete.assert_called_once_with(5)
        assert not storage.exists(path)

    def test_without_image(self, service, mock_repo):
        mock_repo.delete.return_value = Product(id=5, name="Red Mug", image=None)

        service.delete_product(5)

        mock_repo.delete.assert_called_once_with(5)

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.delete.side_effect = RecordNotFoundError("gone")

        with pytest.raises(ProductNotFound):
            service.delete_product(5)
