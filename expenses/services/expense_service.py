"""
Expense Service
Handles expenses booked against projects.

Access rules:
- Listing, creating and summarizing require read access to the project
  (owner or member); otherwise the project is reported as not found
- Updating and deleting require being the expense creator or the owner of
  its project; otherwise AuthorizationError (403)

Creating an expense bumps the parent project's updated_at. Deleting one does
so only when ``touch_project_on_delete`` is enabled.
"""
import logging
from decimal import Decimal

from core.exceptions import NotFoundError, ValidationError
from core.validators import require_text, to_decimal
from expenses.entities import ExpenseEntity
from expenses.models import ExpenseCategory
from projects import permissions

logger = logging.getLogger(__name__)

MINIMUM_AMOUNT = Decimal('0.01')

# Distinguishes "category omitted" (defaults to other) from "category given as empty"
UNSET = object()


def clean_category(category):
    if category is UNSET:
        return ExpenseCategory.OTHER.value
    if category is None or category == "":
        raise ValidationError("Category is required")
    if category not in ExpenseCategory.values:
        raise ValidationError(
            f"Invalid category. Allowed values: {', '.join(ExpenseCategory.values)}"
        )
    return category


class ExpenseService:

    def __init__(self, expenses, projects, touch_project_on_delete=False):
        """
        Args:
            expenses: ExpenseRepository
            projects: ProjectRepository, for access checks and updated_at bumps
            touch_project_on_delete: also bump the project's updated_at on delete
        """
        self._expenses = expenses
        self._projects = projects
        self._touch_project_on_delete = touch_project_on_delete

    def _readable_project(self, user_id, project_id):
        return permissions.require_read(user_id, self._projects.get(project_id))

    def _modifiable_expense(self, user_id, expense_id, action):
        expense = self._expenses.get(expense_id)
        project = self._projects.get(expense.project_id) if expense else None
        permissions.require_expense_access(user_id, expense, project, action=action)
        return expense

    def list_expenses_for_project(self, user_id, project_id, category=None,
                                  date_from=None, date_to=None):
        project = self._readable_project(user_id, project_id)
        if category:
            clean_category(category)
        return self._expenses.list_for_project(
            project.id, category=category, date_from=date_from, date_to=date_to
        )

    def create_expense(self, user_id, project_id, description, amount,
                       category=UNSET, date=None):
        if project_id is None or project_id == "":
            raise ValidationError("Project ID is required")
        entity = ExpenseEntity(
            id=None,
            description=require_text(description, "Description"),
            amount=to_decimal(amount, "Amount", minimum=MINIMUM_AMOUNT),
            category=clean_category(category),
            date=date,
            project_id=project_id,
            created_by=user_id,
        )
        project = self._readable_project(user_id, project_id)
        entity.project_id = project.id

        with self._projects.atomic():
            expense = self._expenses.add(entity)
            self._projects.touch(project.id)

        logger.info(
            "Expense %s (%s) created on project %s by user %s",
            expense.id, expense.amount, project.id, user_id
        )
        return expense

    def get_expense(self, user_id, expense_id):
        expense = self._expenses.get(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        self._readable_project(user_id, expense.project_id)
        return expense

    def update_expense(self, user_id, expense_id, fields):
        """Apply the supplied fields; keys absent from ``fields`` stay untouched."""
        expense = self._modifiable_expense(user_id, expense_id, "update")

        if 'description' in fields:
            expense.description = require_text(fields['description'], "Description")
        if 'amount' in fields:
            expense.amount = to_decimal(fields['amount'], "Amount", minimum=MINIMUM_AMOUNT)
        if 'category' in fields:
            expense.category = clean_category(fields['category'])
        if 'date' in fields:
            if fields['date'] is None:
                raise ValidationError("Date cannot be empty")
            expense.date = fields['date']

        updated = self._expenses.save(expense)
        logger.info("Expense %s updated by user %s", expense_id, user_id)
        return updated

    def delete_expense(self, user_id, expense_id):
        expense = self._modifiable_expense(user_id, expense_id, "delete")

        with self._projects.atomic():
            self._expenses.delete(expense.id)
            if self._touch_project_on_delete:
                self._projects.touch(expense.project_id)

        logger.info("Expense %s deleted by user %s", expense_id, user_id)
        return {'deleted': True}

    def summarize_by_category(self, user_id, project_id):
        """Per-category {category, total, count}, largest total first."""
        project = self._readable_project(user_id, project_id)
        return self._expenses.category_totals(project.id)
