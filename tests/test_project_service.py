from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
import uuid

import pytest

from core.exceptions import NotFoundError, ValidationError
from expenses.entities import ExpenseEntity
from projects.entities import ProjectEntity
from projects.repositories import InMemoryProjectRepository
from projects.services.project_service import ProjectService

from conftest import MEMBER, OUTSIDER, OWNER


def add_expense(expense_repo, project, amount, created_by=OWNER, category="other"):
    return expense_repo.add(ExpenseEntity(
        id=None,
        description="line item",
        amount=Decimal(amount),
        category=category,
        project_id=project.id,
        created_by=created_by,
    ))


class TestCreateProject:

    def test_owner_becomes_sole_member(self, project_service):
        project = project_service.create_project(OWNER, "  Brand refresh ", "2500")

        assert project.name == "Brand refresh"
        assert project.budget == Decimal("2500")
        assert project.created_by == OWNER
        assert project.members == [OWNER]
        assert project.start_date is not None
        assert project.budget_status.total_spent == 0
        assert project.budget_status.remaining == Decimal("2500")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_is_required(self, project_service, name):
        with pytest.raises(ValidationError):
            project_service.create_project(OWNER, name, Decimal("10"))

    @pytest.mark.parametrize("budget", [None, "", "-5", Decimal("-0.01"), "abc", "NaN"])
    def test_budget_must_be_non_negative_number(self, project_service, budget):
        with pytest.raises(ValidationError):
            project_service.create_project(OWNER, "Launch", budget)

    def test_zero_budget_allowed(self, project_service):
        project = project_service.create_project(OWNER, "Volunteer", Decimal("0"))
        assert project.budget_status.percentage == 0

    def test_end_before_start_rejected(self, project_service):
        with pytest.raises(ValidationError):
            project_service.create_project(
                OWNER, "Launch", Decimal("10"),
                start_date=datetime(2024, 5, 1, tzinfo=dt_timezone.utc),
                end_date=datetime(2024, 4, 1, tzinfo=dt_timezone.utc),
            )


    def test_past_end_date_without_start_rejected(self, project_service, project_repo):
        with pytest.raises(ValidationError):
            project_service.create_project(
                OWNER, "Retro", Decimal("100"),
                end_date=datetime(2020, 1, 1, tzinfo=dt_timezone.utc),
            )
        assert project_repo.list_for_user(OWNER) == []


class TestReadProjects:

    def test_list_includes_owned_and_member_projects_newest_first(
            self, project_service, expense_repo):
        mine = project_service.create_project(OWNER, "Mine", Decimal("100"))
        shared = project_service.create_project(MEMBER, "Shared", Decimal("100"))
        project_service.add_member(MEMBER, shared.id, OWNER)
        project_service.create_project(OUTSIDER, "Private", Decimal("100"))

        project_service.update_project(OWNER, mine.id, {"description": "bumped"})

        projects = project_service.list_projects_for_user(OWNER)
        assert [p.name for p in projects] == ["Mine", "Shared"]

    def test_list_annotates_budget_status(self, project_service, expense_repo):
        project = project_service.create_project(OWNER, "Budgeted", Decimal("1000"))
        add_expense(expense_repo, project, "200")
        add_expense(expense_repo, project, "300")

        [listed] = project_service.list_projects_for_user(OWNER)
        assert listed.budget_status.total_spent == Decimal("500")
        assert listed.budget_status.percentage == 50
        assert listed.budget_status.is_over_budget is False

    def test_get_for_member(self, project_service, shared_project):
        project = project_service.get_project(MEMBER, shared_project.id)
        assert project.id == shared_project.id

    def test_get_for_outsider_is_not_found(self, project_service, shared_project):
        with pytest.raises(NotFoundError):
            project_service.get_project(OUTSIDER, shared_project.id)

    def test_get_unknown_is_not_found(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.get_project(OWNER, uuid.uuid4())

    def test_over_budget_status(self, project_service, expense_repo):
        project = project_service.create_project(OWNER, "Tight", Decimal("1000"))
        add_expense(expense_repo, project, "600")
        add_expense(expense_repo, project, "600")

        status = project_service.get_project(OWNER, project.id).budget_status
        assert status.total_spent == Decimal("1200")
        assert status.remaining == 0
        assert status.percentage == 100
        assert status.is_over_budget is True


class TestUpdateProject:

    def test_only_supplied_fields_change(self, project_service, shared_project):
        updated = project_service.update_project(
            OWNER, shared_project.id, {"budget": "1500.50"}
        )

        assert updated.budget == Decimal("1500.50")
        assert updated.name == shared_project.name
        assert updated.members == shared_project.members
        assert updated.updated_at > shared_project.updated_at

    def test_owner_forced_into_members(self, project_service, shared_project):
        updated = project_service.update_project(
            OWNER, shared_project.id, {"members": [MEMBER, OUTSIDER, MEMBER]}
        )
        assert updated.members == [MEMBER, OUTSIDER, OWNER]

    def test_member_cannot_update(self, project_service, shared_project):
        with pytest.raises(NotFoundError):
            project_service.update_project(MEMBER, shared_project.id, {"name": "Mine now"})

        assert project_service.get_project(OWNER, shared_project.id).name == "Website relaunch"

    def test_invalid_values_rejected(self, project_service, shared_project):
        with pytest.raises(ValidationError):
            project_service.update_project(OWNER, shared_project.id, {"name": " "})
        with pytest.raises(ValidationError):
            project_service.update_project(OWNER, shared_project.id, {"budget": "-1"})

    def test_created_by_is_not_updatable(self, project_service, shared_project):
        updated = project_service.update_project(
            OWNER, shared_project.id, {"created_by": OUTSIDER, "name": "Renamed"}
        )
        assert updated.created_by == OWNER
        assert updated.name == "Renamed"


    @pytest.fixture
    def inverted_dates(self, project_repo):
        """A stored project whose end date precedes its start date."""
        return project_repo.add(ProjectEntity(
            id=None,
            name="Legacy import",
            budget=Decimal("100"),
            created_by=OWNER,
            members=[OWNER],
            start_date=datetime(2024, 5, 1, tzinfo=dt_timezone.utc),
            end_date=datetime(2024, 4, 1, tzinfo=dt_timezone.utc),
        ))

    def test_untouched_dates_are_not_revalidated(self, project_service, inverted_dates):
        updated = project_service.update_project(OWNER, inverted_dates.id, {"budget": "200"})

        assert updated.budget == Decimal("200")
        assert updated.end_date == inverted_dates.end_date

    def test_supplied_dates_are_validated(self, project_service, inverted_dates):
        with pytest.raises(ValidationError):
            project_service.update_project(
                OWNER, inverted_dates.id,
                {"end_date": datetime(2024, 4, 15, tzinfo=dt_timezone.utc)},
            )

        fixed = project_service.update_project(
            OWNER, inverted_dates.id,
            {"end_date": datetime(2024, 6, 1, tzinfo=dt_timezone.utc)},
        )
        assert fixed.end_date > fixed.start_date

    def test_unknown_members_rejected(self, expense_repo, clock):
        service = ProjectService(
            InMemoryProjectRepository(clock=clock, users={OWNER, MEMBER}), expense_repo
        )
        project = service.create_project(OWNER, "Known only", Decimal("10"))

        with pytest.raises(ValidationError):
            service.update_project(OWNER, project.id, {"members": [MEMBER, 99]})
        assert service.get_project(OWNER, project.id).members == [OWNER]


class TestDeleteProject:

    def test_cascades_to_expenses(self, project_service, expense_repo, shared_project):
        add_expense(expense_repo, shared_project, "10")
        add_expense(expense_repo, shared_project, "20", created_by=MEMBER)
        other = project_service.create_project(OWNER, "Other", Decimal("50"))
        add_expense(expense_repo, other, "5")

        result = project_service.delete_project(OWNER, shared_project.id)

        assert result == {"deleted": True}
        assert expense_repo.list_for_project(shared_project.id) == []
        assert len(expense_repo.list_for_project(other.id)) == 1
        with pytest.raises(NotFoundError):
            project_service.get_project(OWNER, shared_project.id)

    def test_member_cannot_delete(self, project_service, shared_project):
        with pytest.raises(NotFoundError):
            project_service.delete_project(MEMBER, shared_project.id)
        assert project_service.get_project(OWNER, shared_project.id)


class TestMembers:

    def test_add_member(self, project_service, shared_project):
        assert shared_project.members == [OWNER, MEMBER]

        updated = project_service.add_member(OWNER, shared_project.id, OUTSIDER)
        assert updated.members == [OWNER, MEMBER, OUTSIDER]

    def test_add_existing_member_rejected(self, project_service, shared_project):
        with pytest.raises(ValidationError):
            project_service.add_member(OWNER, shared_project.id, MEMBER)
        with pytest.raises(ValidationError):
            project_service.add_member(OWNER, shared_project.id, OWNER)

    def test_add_unknown_user_rejected(self, expense_repo, clock):
        service = ProjectService(
            InMemoryProjectRepository(clock=clock, users={OWNER, MEMBER, OUTSIDER}), expense_repo
        )
        project = service.create_project(OWNER, "Known only", Decimal("10"))

        with pytest.raises(ValidationError):
            service.add_member(OWNER, project.id, 99)
        assert service.add_member(OWNER, project.id, OUTSIDER).members == [OWNER, OUTSIDER]

    def test_add_requires_user_id(self, project_service, shared_project):
        with pytest.raises(ValidationError):
            project_service.add_member(OWNER, shared_project.id, None)

    def test_member_cannot_add_members(self, project_service, shared_project):
        with pytest.raises(NotFoundError):
            project_service.add_member(MEMBER, shared_project.id, OUTSIDER)

    def test_remove_member(self, project_service, shared_project):
        updated = project_service.remove_member(OWNER, shared_project.id, MEMBER)
        assert updated.members == [OWNER]

        with pytest.raises(NotFoundError):
            project_service.get_project(MEMBER, shared_project.id)

    def test_owner_cannot_be_removed(self, project_service, shared_project):
        with pytest.raises(ValidationError):
            project_service.remove_member(OWNER, shared_project.id, OWNER)

    def test_remove_non_member_rejected(self, project_service, shared_project):
        with pytest.raises(ValidationError):
            project_service.remove_member(OWNER, shared_project.id, OUTSIDER)
