from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _error_response(
    *,
    error_status: str,
    message: str,
    http_status: int,
    details: dict[str, list[str]] | None = None,
) -> Response:
    body: dict[str, object] = {
        "error": {
            "status": error_status,
            "message": message,
        }
    }
    if details:
        body["error"]["details"] = details  # type: ignore[index]
    return Response(body, status=http_status)


def _extract_message(data: Any) -> str | None:
    if isinstance(data, str):
        return data or None
    if isinstance(data, Mapping):
        detail = data.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return None


def _drf_error_status(exc: Exception, response: Response) -> str:
    if isinstance(exc, drf_exceptions.ValidationError):
        return "validation_error"
    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        return "unauthorized"
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return "forbidden"
    if isinstance(exc, drf_exceptions.NotFound):
        return "not_found"
    if isinstance(exc, drf_exceptions.MethodNotAllowed):
        return "method_not_allowed"
    if response.status_code >= 500:
        return "server_error"
    return "bad_request"


def custom_exception_handler(exc: Exception, context):
    """
    Central exception->HTTP mapping for domain/use-case exceptions.

    Keep views thin: raise meaningful exceptions and let this layer translate
    them into consistent API responses.
    """

    response = drf_exception_handler(exc, context)
    if response is not None:
        details = None
        if isinstance(exc, drf_exceptions.ValidationError) and isinstance(response.data, Mapping):
            details = dict(response.data)
        return _error_response(
            error_status=_drf_error_status(exc, response),
            message=_extract_message(response.data) or "Request failed.",
            http_status=response.status_code,
            details=details,
        )

    # Local import to avoid import-time side effects.
    from config import domain_exceptions as domain

    if isinstance(exc, domain.NotFoundError):
        return _error_response(
            error_status="not_found",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, domain.ConfigurationError):
        logger.warning("Configuration error: %s", str(exc))
        return _error_response(
            error_status="service_unavailable",
            message=str(exc),
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, domain.DomainError):
        return _error_response(
            error_status="bad_request",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
        )

    return None
