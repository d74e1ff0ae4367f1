"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and image files to
the injected Django ``Storage``.

Rules enforced here:
- ``slug`` is derived from ``name`` and re-derived only when ``name`` changes.
- ``totalCount`` for listings is an unfiltered count.
- Image replacement removes the previous file only after the record write
  succeeded; a failed write removes the freshly stored file instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.core.exceptions import RecordNotFoundError, UniqueConstraintError
from modules.core.pagination import Page, PageQuery, build_page_meta
from modules.core.uploads import force_remove, store_upload
from modules.core.utils import is_numeric_identifier, slugify_name
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound

if TYPE_CHECKING:
    from django.core.files import File
    from django.core.files.storage import Storage

    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives its repository, file storage and upload directory via
    constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        storage: Storage,
        upload_dir: str = "uploads/products",
    ) -> None:
        self._repo = repository
        self._storage = storage
        self._upload_dir = upload_dir

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, query: Optional[PageQuery] = None) -> Page:
        """Return one page of products, newest first."""
        query = query or PageQuery()
        total_count = self._repo.count()
        items = self._repo.list(skip=query.skip, take=query.take)
        return Page(
            items=list(items),
            meta=build_page_meta(query.page, query.limit, total_count),
        )

    def find_by_id_or_slug(self, id_or_slug: str) -> Optional[Product]:
        """Numeric input is looked up by id, anything else by slug."""
        if not is_numeric_identifier(id_or_slug):
            return self._repo.get_by_slug(id_or_slug)
        number = float(id_or_slug)
        if not number.is_integer():
            return None
        return self._repo.get_by_id(int(number))

    def get_product(self, id_or_slug: str) -> Product:
        """Retrieve a single product by id or slug.

        Raises:
            ProductNotFound: if nothing matches.
        """
        product = self.find_by_id_or_slug(id_or_slug)
        if product is None:
            raise ProductNotFound(f"Product {id_or_slug} not found.")
        return product

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO, image: Optional[File]) -> Product:
        """Store the upload and create the product linked to its categories.

        Raises:
            ProductAlreadyExists: if the derived slug is already taken.
            CategoryNotFound: if a category id does not exist.
        """
        slug = slugify_name(dto.name)
        log = logger.bind(slug=slug)
        image_path = self._store(image)
        fields = {
            "name": dto.name,
            "slug": slug,
            "description": dto.description,
            "price": dto.price,
            "image": image_path,
        }

        try:
            product = self._repo.create(fields, category_ids=dto.category_ids)
        except UniqueConstraintError as exc:
            self._discard(image_path)
            log.warning("product.duplicate_slug", fields=list(exc.fields))
            raise ProductAlreadyExists(exc.fields) from exc
        except Exception:
            self._discard(image_path)
            raise

        log.info("product.created", product_id=product.id)
        return product

    def update_product(
        self, id: int, dto: UpdateProductDTO, image: Optional[File] = None
    ) -> Product:
        """Apply a partial update, replacing the image when one is uploaded.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if a new name collides with another slug.
            CategoryNotFound: if a category id does not exist.
        """
        current = self._repo.get_by_id(id)
        if current is None:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=id)
        previous_image = current.image
        fields = dto.changed_fields()
        if dto.name is not None:
            fields["slug"] = slugify_name(dto.name)
        new_image = self._store(image)
        if new_image is not None:
            fields["image"] = new_image

        try:
            product = self._repo.update(id, fields, category_ids=dto.category_ids)
        except UniqueConstraintError as exc:
            self._discard(new_image)
            log.warning("product.duplicate_slug", fields=list(exc.fields))
            raise ProductAlreadyExists(exc.fields) from exc
        except RecordNotFoundError as exc:
            self._discard(new_image)
            raise ProductNotFound(f"Product {id} not found.") from exc
        except Exception:
            self._discard(new_image)
            raise

        if new_image is not None and previous_image and previous_image != new_image:
            force_remove(self._storage, previous_image)
            log.info("product.image_removed", path=previous_image)

        log.info("product.updated", fields=sorted(fields))
        return product

    def delete_product(self, id: int) -> None:
        """Delete the product row, then its image file.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        try:
            product = self._repo.delete(id)
        except RecordNotFoundError as exc:
            raise ProductNotFound(f"Product {id} not found.") from exc

        force_remove(self._storage, product.image)
        logger.info("product.deleted", product_id=id, image=product.image)

    # ------------------------------------------------------------------
    # Image storage
    # ------------------------------------------------------------------

    def _store(self, image: Optional[File]) -> Optional[str]:
        if image is None:
            return None
        return store_upload(self._storage, image, self._upload_dir)

    def _discard(self, path: Optional[str]) -> None:
        if force_remove(self._storage, path):
            logger.info("product.image_compensated", path=path)
