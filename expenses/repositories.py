"""
Expense storage, mirroring projects.repositories: an interface the services
depend on, an ORM backend and a dict-backed backend for tests.
"""
import copy
import uuid
from collections import defaultdict
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from .entities import CategoryTotal, ExpenseEntity
from .models import Expense


class ExpenseRepository:
    """Storage operations ExpenseService and ProjectService rely on."""

    def get(self, expense_id):
        raise NotImplementedError

    def list_for_project(self, project_id, category=None, date_from=None, date_to=None):
        """Expenses of a project, newest date first, ties broken by newest creation."""
        raise NotImplementedError

    def add(self, entity):
        raise NotImplementedError

    def save(self, entity):
        raise NotImplementedError

    def delete(self, expense_id):
        raise NotImplementedError

    def delete_for_project(self, project_id):
        """Remove every expense of a project. Returns how many were removed."""
        raise NotImplementedError

    def amounts_by_project(self, project_ids):
        """Map each project id to the list of its expense amounts."""
        raise NotImplementedError

    def category_totals(self, project_id):
        """Per-category total and count for a project, largest total first."""
        raise NotImplementedError


class DjangoExpenseRepository(ExpenseRepository):

    def _to_entity(self, expense):
        return ExpenseEntity(
            id=expense.id,
            description=expense.description,
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
            project_id=expense.project_id,
            created_by=expense.created_by_id,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )

    def get(self, expense_id):
        expense = Expense.objects.filter(pk=expense_id).first()
        return self._to_entity(expense) if expense else None

    def list_for_project(self, project_id, category=None, date_from=None, date_to=None):
        queryset = Expense.objects.filter(project_id=project_id)
        if category:
            queryset = queryset.filter(category=category)
        if date_from:
            queryset = queryset.filter(date__gte=date_from)
        if date_to:
            queryset = queryset.filter(date__lte=date_to)
        queryset = queryset.order_by('-date', '-created_at')
        return [self._to_entity(e) for e in queryset]

    def add(self, entity):
        fields = {
            'description': entity.description,
            'amount': entity.amount,
            'category': entity.category,
            'project_id': entity.project_id,
            'created_by_id': entity.created_by,
        }
        if entity.date is not None:
            fields['date'] = entity.date
        expense = Expense.objects.create(**fields)
        return self._to_entity(expense)

    def save(self, entity):
        expense = Expense.objects.get(pk=entity.id)
        expense.description = entity.description
        expense.amount = entity.amount
        expense.category = entity.category
        expense.date = entity.date
        expense.save()
        return self._to_entity(expense)

    def delete(self, expense_id):
        deleted, _ = Expense.objects.filter(pk=expense_id).delete()
        return deleted > 0

    def delete_for_project(self, project_id):
        deleted, _ = Expense.objects.filter(project_id=project_id).delete()
        return deleted

    def amounts_by_project(self, project_ids):
        amounts = {project_id: [] for project_id in project_ids}
        rows = Expense.objects.filter(project_id__in=project_ids).values_list('project_id', 'amount')
        for project_id, amount in rows:
            amounts[project_id].append(amount)
        return amounts

    def category_totals(self, project_id):
        rows = (
            Expense.objects
            .filter(project_id=project_id)
            .values('category')
            .annotate(total=Sum('amount'), count=Count('id'))
            .order_by('-total', 'category')
        )
        return [
            CategoryTotal(category=row['category'], total=row['total'], count=row['count'])
            for row in rows
        ]


class InMemoryExpenseRepository(ExpenseRepository):

    def __init__(self, clock=timezone.now):
        self._items = {}
        self._clock = clock

    def get(self, expense_id):
        entity = self._items.get(expense_id)
        return copy.deepcopy(entity) if entity else None

    def list_for_project(self, project_id, category=None, date_from=None, date_to=None):
        expenses = [e for e in self._items.values() if e.project_id == project_id]
        if category:
            expenses = [e for e in expenses if e.category == category]
        if date_from:
            expenses = [e for e in expenses if e.date >= date_from]
        if date_to:
            expenses = [e for e in expenses if e.date <= date_to]
        expenses.sort(key=lambda e: (e.date, e.created_at), reverse=True)
        return [copy.deepcopy(e) for e in expenses]

    def add(self, entity):
        now = self._clock()
        stored = copy.deepcopy(entity)
        stored.id = stored.id or uuid.uuid4()
        stored.date = stored.date or now
        stored.created_at = now
        stored.updated_at = now
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def save(self, entity):
        if entity.id not in self._items:
            raise KeyError(entity.id)
        stored = copy.deepcopy(entity)
        stored.created_at = self._items[entity.id].created_at
        stored.updated_at = self._clock()
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def delete(self, expense_id):
        return self._items.pop(expense_id, None) is not None

    def delete_for_project(self, project_id):
        doomed = [key for key, e in self._items.items() if e.project_id == project_id]
        for key in doomed:
            del self._items[key]
        return len(doomed)

    def amounts_by_project(self, project_ids):
        amounts = {project_id: [] for project_id in project_ids}
        for expense in self._items.values():
            if expense.project_id in amounts:
                amounts[expense.project_id].append(expense.amount)
        return amounts

    def category_totals(self, project_id):
        totals = defaultdict(lambda: [Decimal('0.00'), 0])
        for expense in self._items.values():
            if expense.project_id == project_id:
                totals[expense.category][0] += expense.amount
                totals[expense.category][1] += 1
        summary = [
            CategoryTotal(category=category, total=total, count=count)
            for category, (total, count) in totals.items()
        ]
        summary.sort(key=lambda row: (-row.total, row.category))
        return summary
