from django.conf import settings
from rest_framework import status
from rest_framework.views import APIView

from accounts.permissions import HasAppRole
from core.responses import envelope
from projects.repositories import DjangoProjectRepository
from .repositories import DjangoExpenseRepository
from .serializers import (
    CategoryTotalSerializer,
    ExpenseCreateInputSerializer,
    ExpenseQuerySerializer,
    ExpenseUpdateInputSerializer,
    serialize_expense,
    serialize_expenses,
)
from .services.expense_service import ExpenseService


def get_expense_service():
    return ExpenseService(
        DjangoExpenseRepository(),
        DjangoProjectRepository(),
        touch_project_on_delete=getattr(settings, 'EXPENSE_DELETE_TOUCHES_PROJECT', False),
    )


class ExpenseCreateView(APIView):
    """Create an expense on a project the caller owns or belongs to."""

    permission_classes = (HasAppRole,)
    failure_messages = {"post": "Failed to create expense"}

    def post(self, request):
        serializer = ExpenseCreateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = get_expense_service().create_expense(
            request.user.id, **serializer.validated_data
        )
        return envelope(serialize_expense(expense), status=status.HTTP_201_CREATED)


class ExpenseDetailView(APIView):
    """
    GET for anyone who can read the expense's project.
    PUT/PATCH and DELETE for the expense creator or the project owner.
    """

    permission_classes = (HasAppRole,)
    failure_messages = {
        "get": "Failed to fetch expense",
        "put": "Failed to update expense",
        "patch": "Failed to update expense",
        "delete": "Failed to delete expense",
    }

    def get(self, request, pk):
        expense = get_expense_service().get_expense(request.user.id, pk)
        return envelope(serialize_expense(expense))

    def put(self, request, pk):
        serializer = ExpenseUpdateInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        expense = get_expense_service().update_expense(
            request.user.id, pk, serializer.validated_data
        )
        return envelope(serialize_expense(expense))

    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        result = get_expense_service().delete_expense(request.user.id, pk)
        return envelope(result)


class ProjectExpenseListView(APIView):
    """Expenses of one project, newest first. Filters: category, date_from, date_to."""

    permission_classes = (HasAppRole,)
    failure_messages = {"get": "Failed to fetch expenses"}

    def get(self, request, project_id):
        query = ExpenseQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        expenses = get_expense_service().list_expenses_for_project(
            request.user.id, project_id, **query.validated_data
        )
        return envelope(serialize_expenses(expenses))


class ProjectExpenseSummaryView(APIView):
    """Per-category totals and counts for one project, largest total first."""

    permission_classes = (HasAppRole,)
    failure_messages = {"get": "Failed to fetch expense summary"}

    def get(self, request, project_id):
        summary = get_expense_service().summarize_by_category(request.user.id, project_id)
        return envelope(CategoryTotalSerializer(summary, many=True).data)
