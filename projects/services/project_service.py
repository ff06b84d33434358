"""
Project Service
Handles the project store operations: listing, creation, updates, deletion
and member management.

Rules enforced here:
- The owner (created_by) is always a member and cannot be removed
- Only the owner may update, delete or manage members
- Owners and members may read; everyone else sees "not found"
- Every project returned carries a freshly computed BudgetStatus
"""
import logging
from decimal import Decimal

from django.utils import timezone

from core.exceptions import ValidationError
from core.validators import check_date_range, optional_text, require_text, to_decimal
from projects import permissions
from projects.entities import ProjectEntity
from projects.services.budget import compute_budget_status

logger = logging.getLogger(__name__)


class ProjectService:

    def __init__(self, projects, expenses):
        """
        Args:
            projects: ProjectRepository
            expenses: ExpenseRepository, used for budget status and cascades
        """
        self._projects = projects
        self._expenses = expenses

    @staticmethod
    def _clean_budget(budget):
        return to_decimal(budget, "Budget", minimum=Decimal('0'))

    @staticmethod
    def _clean_members(owner_id, members):
        """Deduplicate member ids, keeping order, and force the owner in."""
        if not isinstance(members, (list, tuple, set)):
            raise ValidationError("Members must be a list of user ids")
        cleaned = []
        for member in members:
            if member is None:
                raise ValidationError("Members must be a list of user ids")
            if member not in cleaned:
                cleaned.append(member)
        if owner_id not in cleaned:
            cleaned.append(owner_id)
        return cleaned

    def _require_known_users(self, user_ids):
        missing = self._projects.missing_users(user_ids)
        if missing:
            raise ValidationError(
                f"Unknown user ids: {', '.join(str(pk) for pk in missing)}"
            )

    def _with_budget_status(self, projects):
        amounts = self._expenses.amounts_by_project([p.id for p in projects])
        for project in projects:
            project.budget_status = compute_budget_status(
                project.budget, amounts.get(project.id, [])
            )
        return projects

    def _with_one_status(self, project):
        return self._with_budget_status([project])[0]

    def list_projects_for_user(self, user_id):
        """All projects the user owns or belongs to, most recently updated first."""
        return self._with_budget_status(self._projects.list_for_user(user_id))

    def create_project(self, user_id, name, budget, description=None,
                       start_date=None, end_date=None):
        entity = ProjectEntity(
            id=None,
            name=require_text(name, "Name"),
            budget=self._clean_budget(budget),
            description=optional_text(description, "Description"),
            start_date=start_date or timezone.now(),
            end_date=end_date,
            created_by=user_id,
            members=[user_id],
        )
        check_date_range(entity.start_date, end_date)

        project = self._projects.add(entity)
        logger.info("Project %s created by user %s", project.id, user_id)
        return self._with_one_status(project)

    def get_project(self, user_id, project_id):
        project = permissions.require_read(user_id, self._projects.get(project_id))
        return self._with_one_status(project)

    def update_project(self, user_id, project_id, fields):
        """
        Apply the supplied fields to a project the caller owns.
        Keys absent from ``fields`` are left untouched.
        """
        project = permissions.require_write(user_id, self._projects.get(project_id))

        if 'name' in fields:
            project.name = require_text(fields['name'], "Name")
        if 'description' in fields:
            project.description = optional_text(fields['description'], "Description")
        if 'budget' in fields:
            project.budget = self._clean_budget(fields['budget'])
        if 'start_date' in fields:
            if fields['start_date'] is None:
                raise ValidationError("Start date cannot be empty")
            project.start_date = fields['start_date']
        if 'end_date' in fields:
            project.end_date = fields['end_date']
        if 'members' in fields and fields['members'] is not None:
            project.members = self._clean_members(project.created_by, fields['members'])
            self._require_known_users(project.members)

        if 'start_date' in fields or 'end_date' in fields:
            check_date_range(project.start_date, project.end_date)

        updated = self._projects.save(project)
        logger.info("Project %s updated by user %s", project_id, user_id)
        return self._with_one_status(updated)

    def delete_project(self, user_id, project_id):
        """Delete a project the caller owns together with all of its expenses."""
        project = permissions.require_write(user_id, self._projects.get(project_id))

        with self._projects.atomic():
            removed = self._expenses.delete_for_project(project.id)
            self._projects.delete(project.id)

        logger.info(
            "Project %s deleted by user %s (%s expenses removed)",
            project_id, user_id, removed
        )
        return {'deleted': True}

    def add_member(self, user_id, project_id, new_member_id):
        if new_member_id is None or new_member_id == "":
            raise ValidationError("User ID is required")

        project = permissions.require_write(user_id, self._projects.get(project_id))
        if project.is_member(new_member_id):
            raise ValidationError("User is already a member of this project")
        self._require_known_users([new_member_id])

        project.members.append(new_member_id)
        updated = self._projects.save(project)
        logger.info("User %s added to project %s", new_member_id, project_id)
        return self._with_one_status(updated)

    def remove_member(self, user_id, project_id, member_id):
        project = permissions.require_write(user_id, self._projects.get(project_id))
        if project.is_owner(member_id):
            raise ValidationError("The project owner cannot be removed")
        if not project.is_member(member_id):
            raise ValidationError("User is not a member of this project")

        project.members = [m for m in project.members if m != member_id]
        updated = self._projects.save(project)
        logger.info("User %s removed from project %s", member_id, project_id)
        return self._with_one_status(updated)
