"""Shared API exceptions and the project-wide DRF exception handler.

Every error leaves the API as ``{"kind": ..., "message": ...}``; field-level
validation detail is kept under ``errors`` and conflicts may carry the
existing record under ``data``.
"""

import logging

from django.db import DatabaseError, IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class Conflict(APIException):
    """A unique record (username, email, restaurant) already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"

    def __init__(self, detail=None, code=None, data=None):
        super().__init__(detail, code)
        self.data = data


class MediaUploadError(APIException):
    """The blob storage backend could not persist an image."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Image upload failed."
    default_code = "upstream"


_KIND_BY_STATUS = {
    400: "validation",
    401: "authentication",
    403: "authorization",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def _kind_for(status_code: int) -> str:
    if status_code >= 500:
        return "upstream"
    return _KIND_BY_STATUS.get(status_code, "error")


def _first_message(detail) -> str:
    """Pick one human-readable message out of a (possibly nested) DRF detail."""
    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for value in detail.values():
            return _first_message(value)
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def structured_exception_handler(exc, context):
    """Wrap DRF's default handler so all failures share one response shape."""
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get("view").__class__.__name__, exc)
        set_rollback()
        return Response(
            {"kind": "conflict", "message": "Resource already exists."},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, DatabaseError):
        logger.exception("Database failure in %s", context.get("view").__class__.__name__)
        set_rollback()
        return Response(
            {"kind": "upstream", "message": "Database unavailable."},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if response.status_code >= 500:
        logger.error("Upstream failure: %s", exc)

    original = response.data
    body = {
        "kind": _kind_for(response.status_code),
        "message": _first_message(original),
    }
    if isinstance(exc, ValidationError):
        body["errors"] = original
    data = getattr(exc, "data", None)
    if data is not None:
        body["data"] = data
    response.data = body
    return response
