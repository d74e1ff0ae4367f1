"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into HTTP status codes;
anything else is left to the project exception handler (500).
"""

from __future__ import annotations

from typing import Any, List, Optional

from django.conf import settings
from django.core.files.storage import default_storage
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import RecordNotFoundError, UniqueConstraintError
from modules.core.pagination import DEFAULT_PAGE, PageQuery
from modules.core.utils import parse_integer_identifier
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import CategoryNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

CATEGORY_IDS_FIELD = "categoryIds"
IMAGE_FIELD = "image"


def _text(data: Any, key: str) -> Optional[str]:
    """Form value for ``key``; missing and blank values read as ``None``."""
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


def _category_ids(data: Any) -> Optional[List[Any]]:
    """Accept repeated fields, comma-separated strings or a JSON list."""
    if CATEGORY_IDS_FIELD not in data:
        return None
    if hasattr(data, "getlist"):
        raw = data.getlist(CATEGORY_IDS_FIELD)
    else:
        raw = data.get(CATEGORY_IDS_FIELD)
        raw = raw if isinstance(raw, list) else [raw]
    ids: List[Any] = []
    for item in raw:
        if isinstance(item, str):
            ids.extend(part.strip() for part in item.split(",") if part.strip())
        elif item is not None:
            ids.append(item)
    return ids


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` and the
    project's default storage (DIP).  All ORM access goes through the
    service/repository layer.
    """

    serializer_class = ProductSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    lookup_value_regex = "[^/]+"
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            storage=default_storage,
            upload_dir=settings.PRODUCT_UPLOAD_DIR,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /products?page=&limit="""
        params = request.query_params
        try:
            query = PageQuery(
                page=params.get("page", DEFAULT_PAGE),
                limit=params.get("limit", settings.DEFAULT_PAGE_LIMIT),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        page = self._service.list_products(query)
        return Response(
            {
                "items": ProductSerializer(page.items, many=True).data,
                "meta": page.meta.to_response(),
            }
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /products/{idOrSlug}"""
        try:
            product = self._service.get_product(pk or "")
        except RecordNotFoundError:
            return Response(status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /products (multipart, ``image`` required)"""
        data = request.data
        image = request.FILES.get(IMAGE_FIELD)
        if image is None:
            return Response(
                {"detail": f"Field '{IMAGE_FIELD}' is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        payload = {
            "name": _text(data, "name"),
            "description": _text(data, "description"),
            "price": _text(data, "price"),
            "category_ids": _category_ids(data),
        }
        try:
            dto = CreateProductDTO(
                **{key: value for key, value in payload.items() if value is not None}
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.create_product(dto, image)
        except (UniqueConstraintError, RecordNotFoundError, CategoryNotFound) as exc:
            return self._domain_error(exc)

        return Response(
            ProductSerializer(product).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /products/{id} (multipart, ``image`` optional)"""
        product_id = parse_integer_identifier(pk)
        if product_id is None:
            return Response(status=status.HTTP_404_NOT_FOUND)

        data = request.data
        try:
            payload = {
                "name": _text(data, "name"),
                "description": data.get("description"),
                "category_ids": _category_ids(data),
            }
            if "price" in data:
                # blank clears the price
                payload["price"] = _text(data, "price")
            dto = UpdateProductDTO(**payload)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(
                product_id, dto, request.FILES.get(IMAGE_FIELD)
            )
        except (UniqueConstraintError, RecordNotFoundError, CategoryNotFound) as exc:
            return self._domain_error(exc)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /products/{id}"""
        product_id = parse_integer_identifier(pk)
        if product_id is None:
            return Response(status=status.HTTP_404_NOT_FOUND)
        try:
            self._service.delete_product(product_id)
        except (UniqueConstraintError, RecordNotFoundError) as exc:
            return self._domain_error(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _domain_error(exc: Exception) -> Response:
        if isinstance(exc, UniqueConstraintError):
            return Response(
                {"detail": str(exc), "fields": list(exc.fields)},
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        if isinstance(exc, CategoryNotFound):
            return Response(
                {"detail": str(exc), CATEGORY_IDS_FIELD: list(exc.ids)},
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        return Response(status=status.HTTP_404_NOT_FOUND)
