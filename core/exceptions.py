"""
Error taxonomy shared by the project and expense services.

Services raise these; the DRF exception handler in ``core.handlers`` turns
them into the ``{"ok": false, "error": ...}`` envelope with the matching
HTTP status.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class BudgetTrackerError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "error"

    @property
    def message(self):
        return str(self.detail)


class ValidationError(BudgetTrackerError):
    """Missing or malformed required field."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"
    default_code = "invalid"


class NotFoundError(BudgetTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class AuthorizationError(BudgetTrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"
    default_code = "permission_denied"
