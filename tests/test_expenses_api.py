from datetime import timedelta
from decimal import Decimal
import uuid

import pytest
from django.utils import timezone

from expenses.models import Expense
from projects.models import Project

pytestmark = pytest.mark.django_db


@pytest.fixture
def member_client(client_for, member):
    return client_for(member)


def post_expense(client, project_id, **fields):
    body = {"description": "Ads", "amount": "10.00", "projectId": project_id}
    body.update(fields)
    return client.post("/api/expenses/", body, format="json")


@pytest.fixture
def member_expense(member_client, api_project):
    response = post_expense(
        member_client, api_project["id"],
        description="Stock photos", amount="40.00", category="design",
    )
    assert response.status_code == 201, response.data
    return response.data["data"]


def test_create_expense(member_client, member, api_project):
    response = post_expense(
        member_client, api_project["id"], amount="120.50", category="marketing",
        date="2024-03-05T10:00:00Z",
    )

    assert response.status_code == 201
    data = response.data["data"]
    assert data["amount"] == Decimal("120.50")
    assert data["category"] == "marketing"
    assert data["project"] == api_project["id"]
    assert data["createdBy"]["id"] == member.id
    assert data["date"] == "2024-03-05T10:00:00Z"


def test_create_defaults_category_to_other(member_client, api_project):
    response = post_expense(member_client, api_project["id"])

    assert response.status_code == 201
    assert response.data["data"]["category"] == "other"


@pytest.mark.parametrize("fields", [
    {"category": "travel"},
    {"category": ""},
    {"amount": "0"},
    {"amount": "-1"},
    {"description": ""},
])
def test_create_rejects_invalid_fields(member_client, api_project, fields):
    response = post_expense(member_client, api_project["id"], **fields)

    assert response.status_code == 400
    assert response.data["ok"] is False
    assert not Expense.objects.exists()


def test_create_requires_project_id(member_client):
    response = member_client.post(
        "/api/expenses/", {"description": "Ads", "amount": "10"}, format="json"
    )
    assert response.status_code == 400


def test_create_on_foreign_project_is_404(client_for, outsider, api_project):
    response = post_expense(client_for(outsider), api_project["id"])

    assert response.status_code == 404
    assert not Expense.objects.exists()


def test_create_touches_project(member_client, api_project):
    stale = timezone.now() - timedelta(days=3)
    Project.objects.filter(pk=api_project["id"]).update(updated_at=stale)

    post_expense(member_client, api_project["id"])

    assert Project.objects.get(pk=api_project["id"]).updated_at > stale


def test_list_project_expenses_newest_first(owner_client, member_client, api_project):
    post_expense(owner_client, api_project["id"], description="old", date="2024-01-01T00:00:00Z")
    post_expense(member_client, api_project["id"], description="new", date="2024-06-01T00:00:00Z")
    post_expense(owner_client, api_project["id"], description="mid", date="2024-03-01T00:00:00Z")

    response = member_client.get(f"/api/expenses/project/{api_project['id']}/")

    assert response.status_code == 200
    assert [e["description"] for e in response.data["data"]] == ["new", "mid", "old"]


def test_list_filters(owner_client, api_project):
    post_expense(owner_client, api_project["id"], description="jan", category="hr",
                 date="2024-01-10T00:00:00Z")
    post_expense(owner_client, api_project["id"], description="may", category="hr",
                 date="2024-05-10T00:00:00Z")
    post_expense(owner_client, api_project["id"], description="june", category="design",
                 date="2024-06-10T00:00:00Z")
    url = f"/api/expenses/project/{api_project['id']}/"

    by_category = owner_client.get(url, {"category": "hr"}).data["data"]
    assert {e["description"] for e in by_category} == {"jan", "may"}

    by_range = owner_client.get(url, {"date_from": "2024-05-01T00:00:00Z"}).data["data"]
    assert {e["description"] for e in by_range} == {"may", "june"}

    assert owner_client.get(url, {"category": "bogus"}).status_code == 400


def test_list_for_outsider_is_404(client_for, outsider, api_project):
    response = client_for(outsider).get(f"/api/expenses/project/{api_project['id']}/")
    assert response.status_code == 404


def test_get_expense(owner_client, client_for, outsider, member_expense):
    url = f"/api/expenses/{member_expense['id']}/"

    assert owner_client.get(url).data["data"]["description"] == "Stock photos"
    assert client_for(outsider).get(url).status_code == 404


def test_creator_updates_own_expense(member_client, member_expense):
    response = member_client.put(
        f"/api/expenses/{member_expense['id']}/", {"amount": "45.00"}, format="json"
    )

    assert response.status_code == 200
    data = response.data["data"]
    assert data["amount"] == Decimal("45.00")
    assert data["description"] == "Stock photos"


def test_project_owner_updates_any_expense(owner_client, member_expense):
    response = owner_client.patch(
        f"/api/expenses/{member_expense['id']}/", {"category": "marketing"}, format="json"
    )

    assert response.status_code == 200
    assert response.data["data"]["category"] == "marketing"


def test_other_member_cannot_modify(owner_client, client_for, make_user, api_project, member_expense):
    colleague = make_user("tess")
    owner_client.post(
        f"/api/projects/{api_project['id']}/members/", {"userId": colleague.id}, format="json"
    )
    colleague_client = client_for(colleague)
    url = f"/api/expenses/{member_expense['id']}/"

    response = colleague_client.put(url, {"amount": "1.00"}, format="json")
    assert response.status_code == 403
    assert response.data == {"ok": False, "error": "Not authorized to update this expense"}

    assert colleague_client.delete(url).status_code == 403
    assert Expense.objects.get(pk=member_expense["id"]).amount == Decimal("40.00")


def test_update_unknown_expense_is_404(owner_client):
    response = owner_client.put(f"/api/expenses/{uuid.uuid4()}/", {"amount": "1"}, format="json")
    assert response.status_code == 404


def test_delete_expense(member_client, member_expense):
    response = member_client.delete(f"/api/expenses/{member_expense['id']}/")

    assert response.status_code == 200
    assert response.data == {"ok": True, "data": {"deleted": True}}
    assert not Expense.objects.filter(pk=member_expense["id"]).exists()


def test_delete_touches_project_when_enabled(settings, owner_client, api_project, member_expense):
    settings.EXPENSE_DELETE_TOUCHES_PROJECT = True
    stale = timezone.now() - timedelta(days=3)
    Project.objects.filter(pk=api_project["id"]).update(updated_at=stale)

    owner_client.delete(f"/api/expenses/{member_expense['id']}/")

    assert Project.objects.get(pk=api_project["id"]).updated_at > stale


def test_summary(owner_client, member_client, api_project):
    post_expense(owner_client, api_project["id"], amount="100", category="marketing")
    post_expense(member_client, api_project["id"], amount="50", category="marketing")
    post_expense(owner_client, api_project["id"], amount="400", category="development")

    response = member_client.get(f"/api/expenses/summary/project/{api_project['id']}/")

    assert response.status_code == 200
    assert [(row["category"], row["total"], row["count"]) for row in response.data["data"]] == [
        ("development", Decimal("400"), 1),
        ("marketing", Decimal("150"), 2),
    ]


def test_expenses_feed_project_budget_status(owner_client, member_client, api_project):
    post_expense(member_client, api_project["id"], amount="600")
    post_expense(owner_client, api_project["id"], amount="600")

    status = owner_client.get(f"/api/projects/{api_project['id']}/").data["data"]["budgetStatus"]

    assert status == {
        "totalSpent": 1200, "percentage": 100, "remaining": 0, "isOverBudget": True,
    }
