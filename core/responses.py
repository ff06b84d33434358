from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(data=None, status=http_status.HTTP_200_OK):
    """Wrap a successful payload in the ``{"ok": true, "data": ...}`` shape."""
    return Response({"ok": True, "data": data}, status=status)


def error_envelope(error, status=http_status.HTTP_400_BAD_REQUEST, headers=None):
    return Response({"ok": False, "error": error}, status=status, headers=headers)
