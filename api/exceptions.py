"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error is rendered as ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthFailureError,
    AuthorizationHeaderNotFoundError,
    DomainException,
    DownloadTokenMissingError,
    ForbiddenError,
    InternalError,
    InvalidStateError,
    InvalidTokenFormatError,
    LicenseDeactivatedError,
    LimitExceededError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins.
_DOMAIN_STATUS_CODES = (
    (LicenseDeactivatedError, status.HTTP_409_CONFLICT),
    (AuthorizationHeaderNotFoundError, status.HTTP_400_BAD_REQUEST),
    (InvalidTokenFormatError, status.HTTP_400_BAD_REQUEST),
    (DownloadTokenMissingError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidStateError, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (AuthFailureError, status.HTTP_401_UNAUTHORIZED),
    (LimitExceededError, status.HTTP_409_CONFLICT),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_code_for(exc: DomainException) -> int:
    """Return the HTTP status for a domain exception."""
    for exc_class, status_code in _DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    correlation_id = _get_correlation_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, correlation_id)
    elif isinstance(exc, ValidationError):
        response = Response(
            {
                "error": {
                    "code": "invalid_request",
                    "message": "Request validation failed",
                    "details": exc.detail,
                }
            },
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, ValueError):
        logger.info("Rejected request value: %s", exc, extra={"correlation_id": correlation_id})
        response = Response(
            {"error": {"code": "invalid_request", "message": str(exc)}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        response.data = {
            "error": {
                "code": getattr(exc, "default_code", "api_error"),
                "message": response.data.get("detail", exc.default_detail),
            }
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "not_found", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, correlation_id)

    if correlation_id:
        response["X-Correlation-ID"] = correlation_id
    return response


def _get_correlation_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract correlation ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _handle_domain_exception(exc: DomainException, correlation_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_code_for(exc)
    log_extra = {"correlation_id": correlation_id, "error_code": exc.code}
    if status_code >= 500:
        logger.error("Domain error: %s - %s", exc.code, exc.message, extra=log_extra, exc_info=exc)
    else:
        logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra=log_extra)
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_unexpected_exception(exc: Exception, correlation_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error(
        "Unexpected error: %s", exc, extra={"correlation_id": correlation_id}, exc_info=exc
    )
    return Response(
        {"error": {"code": "internal_error", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
