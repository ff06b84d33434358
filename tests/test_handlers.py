import pytest
from rest_framework import serializers

from core.exceptions import NotFoundError
from core.handlers import _flatten, envelope_exception_handler
from projects import views as project_views


class ExplodingService:

    def list_projects_for_user(self, user_id):
        raise RuntimeError("connection reset")


@pytest.mark.django_db
def test_unexpected_error_returns_view_failure_message(monkeypatch, owner_client):
    monkeypatch.setattr(project_views, "get_project_service", ExplodingService)

    response = owner_client.get("/api/projects/")

    assert response.status_code == 500
    assert response.data == {"ok": False, "error": "Failed to fetch projects"}


def test_service_error_keeps_status():
    response = envelope_exception_handler(NotFoundError("Project not found"), {})

    assert response.status_code == 404
    assert response.data == {"ok": False, "error": "Project not found"}


def test_validation_details_are_flattened():
    exc = serializers.ValidationError({
        "budget": ["A valid number is required."],
        "non_field_errors": ["Broken payload."],
    })

    response = envelope_exception_handler(exc, {})

    assert response.status_code == 400
    assert response.data["error"] == "budget: A valid number is required.; Broken payload."


def test_flatten_plain_values():
    assert _flatten("oops") == "oops"
    assert _flatten(["a", "b"]) == "a b"
    assert _flatten({"detail": "Not found."}) == "Not found."
