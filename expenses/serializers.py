from rest_framework import serializers

from accounts.fields import UserRefField, users_by_id


class ExpenseCreateInputSerializer(serializers.Serializer):
    """
    Parses POST /expenses bodies. Category is passed through untouched so the
    service can tell "omitted" (defaults to other) from "invalid".
    """
    description = serializers.CharField(max_length=255, allow_blank=True)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date = serializers.DateTimeField(required=False, allow_null=True)
    projectId = serializers.UUIDField(source='project_id')


class ExpenseUpdateInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    date = serializers.DateTimeField(required=False)


class ExpenseQuerySerializer(serializers.Serializer):
    """Optional filters for listing a project's expenses."""
    category = serializers.CharField(required=False, allow_blank=True)
    date_from = serializers.DateTimeField(required=False)
    date_to = serializers.DateTimeField(required=False)


class ExpenseSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    description = serializers.CharField(read_only=True)
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    category = serializers.CharField(read_only=True)
    date = serializers.DateTimeField(read_only=True)
    project = serializers.UUIDField(source='project_id', read_only=True)
    createdBy = UserRefField(source='created_by')
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class CategoryTotalSerializer(serializers.Serializer):
    category = serializers.CharField(read_only=True)
    total = serializers.DecimalField(max_digits=None, decimal_places=2, read_only=True)
    count = serializers.IntegerField(read_only=True)


def serialize_expenses(expenses):
    context = {'users': users_by_id(e.created_by for e in expenses)}
    return ExpenseSerializer(expenses, many=True, context=context).data


def serialize_expense(expense):
    return serialize_expenses([expense])[0]
