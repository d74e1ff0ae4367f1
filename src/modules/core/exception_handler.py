"""DRF exception handler for the catalog API.

DRF's default handler covers ``APIException`` subclasses and ``Http404``;
everything else would escape the view.  Those failures are logged and
answered with a generic 500 body instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error."


def api_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    logger.exception(
        "api.unhandled_exception",
        view=type(view).__name__ if view is not None else None,
        error_type=type(exc).__name__,
    )
    set_rollback()
    return Response(
        {"detail": INTERNAL_ERROR_DETAIL},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
