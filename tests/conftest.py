from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from expenses.repositories import InMemoryExpenseRepository
from expenses.services.expense_service import ExpenseService
from projects.repositories import InMemoryProjectRepository
from projects.services.project_service import ProjectService


class FakeClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2024, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
        self.step = step

    def __call__(self):
        self.current += self.step
        return self.current


OWNER = 1
MEMBER = 2
OUTSIDER = 3


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def project_repo(clock):
    return InMemoryProjectRepository(clock=clock)


@pytest.fixture
def expense_repo(clock):
    return InMemoryExpenseRepository(clock=clock)


@pytest.fixture
def project_service(project_repo, expense_repo):
    return ProjectService(project_repo, expense_repo)


@pytest.fixture
def expense_service(expense_repo, project_repo):
    return ExpenseService(expense_repo, project_repo)


@pytest.fixture
def shared_project(project_service):
    """Project owned by OWNER with MEMBER added."""
    project = project_service.create_project(OWNER, "Website relaunch", Decimal("1000"))
    return project_service.add_member(OWNER, project.id, MEMBER)


# API fixtures

@pytest.fixture
def make_user(django_user_model):
    def _make_user(username, role="user", **extra):
        return django_user_model.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password="secret-pass",
            role=role,
            **extra,
        )
    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user("olivia", name="Olivia Owner")


@pytest.fixture
def member(make_user):
    return make_user("mateo", name="Mateo Member")


@pytest.fixture
def outsider(make_user):
    return make_user("oscar")


@pytest.fixture
def client_for():
    def _client_for(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def owner_client(client_for, owner):
    return client_for(owner)


@pytest.fixture
def api_project(owner_client, owner, member):
    """Project created through the API by `owner`, with `member` added."""
    response = owner_client.post(
        "/api/projects/", {"name": "Launch", "budget": "1000.00"}, format="json"
    )
    assert response.status_code == 201, response.data
    project_id = response.data["data"]["id"]
    response = owner_client.post(
        f"/api/projects/{project_id}/members/", {"userId": member.id}, format="json"
    )
    assert response.status_code == 200, response.data
    return response.data["data"]
