"""
DRF exception handler that renders every failure as ``{"ok": false, "error": "..."}``.

Expected failures (service errors, serializer validation, authentication)
keep the status DRF assigns them. Anything else is logged with its traceback
and answered with a 500 carrying the view's generic failure message, so no
exception reaches the client unhandled.
"""
import logging

from rest_framework import status
from rest_framework.views import exception_handler

from .responses import error_envelope

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Internal server error"


def _flatten(detail, field=None):
    """Collapse DRF error details (str, list or dict) into one readable line."""
    if isinstance(detail, dict):
        if set(detail) == {"detail"}:
            return _flatten(detail["detail"], field)
        return "; ".join(
            _flatten(value, None if key == "non_field_errors" else key)
            for key, value in detail.items()
        )
    if isinstance(detail, (list, tuple)):
        return " ".join(_flatten(item, field) for item in detail)
    return f"{field}: {detail}" if field else str(detail)


def _failure_message(context):
    view = context.get("view")
    request = context.get("request")
    messages = getattr(view, "failure_messages", None) or {}
    method = request.method.lower() if request is not None else ""
    return messages.get(method, DEFAULT_FAILURE_MESSAGE)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else "request",
            exc_info=exc,
        )
        return error_envelope(
            _failure_message(context),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Server error %s: %s", response.status_code, exc)

    headers = {
        key: value for key, value in response.items()
        if key in ("WWW-Authenticate", "Retry-After", "Allow")
    }
    return error_envelope(
        _flatten(response.data),
        status=response.status_code,
        headers=headers or None,
    )
