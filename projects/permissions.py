"""
Authorization rules for projects and the expenses booked against them.

Every service operation runs one of these predicates before touching the
store:

- can_read: owner or member (list/get project, list/create/summarize expenses)
- can_write: owner only (update/delete project, manage members)
- can_modify_expense: expense creator or project owner (update/delete expense)

Project-level denials are reported as "not found" while
CONCEAL_FORBIDDEN_PROJECTS is on, so callers cannot probe for the existence
of projects they have no access to. Expense-level denials are reported as 403.
"""
import logging

from core.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)

CONCEAL_FORBIDDEN_PROJECTS = True

PROJECT_NOT_FOUND = "Project not found or access denied"
PROJECT_NOT_FOUND_OR_NOT_AUTHORIZED = "Project not found or not authorized"


def can_read(user_id, project):
    return project is not None and (
        project.is_owner(user_id) or project.is_member(user_id)
    )


def can_write(user_id, project):
    return project is not None and project.is_owner(user_id)


def can_modify_expense(user_id, expense, project):
    if expense is None:
        return False
    if expense.created_by == user_id:
        return True
    return can_write(user_id, project)


def require_read(user_id, project):
    """Return the project when the caller may read it, else raise NotFoundError."""
    if not can_read(user_id, project):
        if project is not None:
            logger.warning("User %s denied read access to project %s", user_id, project.id)
        raise NotFoundError(PROJECT_NOT_FOUND)
    return project


def require_write(user_id, project):
    """
    Return the project when the caller owns it.

    Non-owners get the same NotFoundError as a missing project while
    CONCEAL_FORBIDDEN_PROJECTS is on, otherwise an AuthorizationError.
    """
    if project is None:
        raise NotFoundError(PROJECT_NOT_FOUND_OR_NOT_AUTHORIZED)
    if not can_write(user_id, project):
        logger.warning("User %s denied write access to project %s", user_id, project.id)
        if CONCEAL_FORBIDDEN_PROJECTS:
            raise NotFoundError(PROJECT_NOT_FOUND_OR_NOT_AUTHORIZED)
        raise AuthorizationError("Not authorized to modify this project")
    return project


def require_expense_access(user_id, expense, project, action="update"):
    if expense is None:
        raise NotFoundError("Expense not found")
    if not can_modify_expense(user_id, expense, project):
        logger.warning("User %s denied %s on expense %s", user_id, action, expense.id)
        raise AuthorizationError(f"Not authorized to {action} this expense")
    return expense
