"""
Project storage.

ProjectService talks to a ProjectRepository, never to the ORM directly.
DjangoProjectRepository is the database backend used by the API;
InMemoryProjectRepository keeps entities in a dict and backs the unit tests.
"""
import copy
import uuid
from contextlib import nullcontext

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from .entities import ProjectEntity
from .models import Project


class ProjectRepository:
    """Storage operations ProjectService relies on."""

    def get(self, project_id):
        raise NotImplementedError

    def list_for_user(self, user_id):
        """Projects the user owns or is a member of, most recently updated first."""
        raise NotImplementedError

    def add(self, entity):
        raise NotImplementedError

    def save(self, entity):
        raise NotImplementedError

    def delete(self, project_id):
        raise NotImplementedError

    def touch(self, project_id):
        """Bump updated_at without changing any other field."""
        raise NotImplementedError

    def missing_users(self, user_ids):
        """Ids from ``user_ids`` that do not belong to any account, in input order."""
        raise NotImplementedError

    def atomic(self):
        """Context manager grouping several writes into one unit of work."""
        raise NotImplementedError


class DjangoProjectRepository(ProjectRepository):

    def _queryset(self):
        return Project.objects.prefetch_related('members')

    def _to_entity(self, project):
        return ProjectEntity(
            id=project.id,
            name=project.name,
            description=project.description,
            budget=project.budget,
            start_date=project.start_date,
            end_date=project.end_date,
            created_by=project.created_by_id,
            members=[member.id for member in project.members.all()],
            created_at=project.created_at,
            updated_at=project.updated_at,
        )

    def get(self, project_id):
        project = self._queryset().filter(pk=project_id).first()
        return self._to_entity(project) if project else None

    def list_for_user(self, user_id):
        projects = (
            self._queryset()
            .filter(Q(created_by_id=user_id) | Q(members__id=user_id))
            .distinct()
            .order_by('-updated_at')
        )
        return [self._to_entity(p) for p in projects]

    def add(self, entity):
        with transaction.atomic():
            project = Project.objects.create(
                name=entity.name,
                description=entity.description,
                budget=entity.budget,
                start_date=entity.start_date or timezone.now(),
                end_date=entity.end_date,
                created_by_id=entity.created_by,
            )
            project.members.set(entity.members)
        return self.get(project.id)

    def save(self, entity):
        with transaction.atomic():
            project = Project.objects.select_for_update().get(pk=entity.id)
            project.name = entity.name
            project.description = entity.description
            project.budget = entity.budget
            project.start_date = entity.start_date
            project.end_date = entity.end_date
            project.save()
            project.members.set(entity.members)
        return self.get(entity.id)

    def delete(self, project_id):
        deleted, _ = Project.objects.filter(pk=project_id).delete()
        return deleted > 0

    def touch(self, project_id):
        Project.objects.filter(pk=project_id).update(updated_at=timezone.now())

    def missing_users(self, user_ids):
        known = set(
            get_user_model().objects.filter(pk__in=user_ids).values_list('pk', flat=True)
        )
        return [pk for pk in user_ids if pk not in known]

    def atomic(self):
        return transaction.atomic()


class InMemoryProjectRepository(ProjectRepository):
    """
    Dict-backed repository. Entities are copied in and out so callers
    cannot mutate stored state without going through save().
    """

    def __init__(self, clock=timezone.now, users=None):
        self._items = {}
        self._clock = clock
        # None means every user id is accepted
        self._users = users

    def get(self, project_id):
        entity = self._items.get(project_id)
        return copy.deepcopy(entity) if entity else None

    def list_for_user(self, user_id):
        visible = [
            p for p in self._items.values()
            if p.is_owner(user_id) or p.is_member(user_id)
        ]
        visible.sort(key=lambda p: p.updated_at, reverse=True)
        return [copy.deepcopy(p) for p in visible]

    def add(self, entity):
        now = self._clock()
        stored = copy.deepcopy(entity)
        stored.id = stored.id or uuid.uuid4()
        stored.start_date = stored.start_date or now
        stored.created_at = now
        stored.updated_at = now
        stored.budget_status = None
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def save(self, entity):
        if entity.id not in self._items:
            raise KeyError(entity.id)
        stored = copy.deepcopy(entity)
        stored.created_at = self._items[entity.id].created_at
        stored.updated_at = self._clock()
        stored.budget_status = None
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def delete(self, project_id):
        return self._items.pop(project_id, None) is not None

    def touch(self, project_id):
        if project_id in self._items:
            self._items[project_id].updated_at = self._clock()

    def missing_users(self, user_ids):
        if self._users is None:
            return []
        return [pk for pk in user_ids if pk not in self._users]

    def atomic(self):
        return nullcontext()
