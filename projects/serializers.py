from rest_framework import serializers

from accounts.fields import UserRefField, users_by_id
from accounts.models import User


class ProjectCreateInputSerializer(serializers.Serializer):
    """Parses POST /projects bodies. Emptiness and sign rules live in ProjectService."""
    name = serializers.CharField(max_length=255, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    budget = serializers.DecimalField(max_digits=15, decimal_places=2)
    startDate = serializers.DateTimeField(source='start_date', required=False, allow_null=True)
    endDate = serializers.DateTimeField(source='end_date', required=False, allow_null=True)

    def validate(self, attrs):
        # An explicit null start date means "now", same as leaving it out
        if attrs.get('start_date', False) is None:
            attrs.pop('start_date')
        return attrs


class ProjectUpdateInputSerializer(serializers.Serializer):
    """Parses PUT /projects/:id bodies. Only the keys present are applied."""
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    budget = serializers.DecimalField(max_digits=15, decimal_places=2, required=False)
    startDate = serializers.DateTimeField(source='start_date', required=False)
    endDate = serializers.DateTimeField(source='end_date', required=False, allow_null=True)
    members = serializers.ListField(
        child=serializers.IntegerField(), required=False, allow_null=True
    )

    def validate_members(self, value):
        if value is None:
            return value
        known = set(User.objects.filter(pk__in=value).values_list('pk', flat=True))
        unknown = sorted(set(value) - known)
        if unknown:
            raise serializers.ValidationError(
                f"Unknown user ids: {', '.join(str(pk) for pk in unknown)}"
            )
        return value


class MemberInputSerializer(serializers.Serializer):
    userId = serializers.IntegerField(source='user_id')

    def validate_userId(self, value):
        if not User.objects.filter(pk=value).exists():
            raise serializers.ValidationError("User not found.")
        return value


class BudgetStatusSerializer(serializers.Serializer):
    totalSpent = serializers.DecimalField(
        source='total_spent', max_digits=None, decimal_places=2, read_only=True)
    percentage = serializers.IntegerField(read_only=True)
    remaining = serializers.DecimalField(max_digits=None, decimal_places=2, read_only=True)
    isOverBudget = serializers.BooleanField(source='is_over_budget', read_only=True)


class ProjectSerializer(serializers.Serializer):
    """Read shape of a project, including its computed budget status."""
    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    budget = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)
    startDate = serializers.DateTimeField(source='start_date', read_only=True)
    endDate = serializers.DateTimeField(source='end_date', read_only=True, allow_null=True)
    createdBy = UserRefField(source='created_by')
    members = serializers.ListField(child=UserRefField(), read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    budgetStatus = BudgetStatusSerializer(source='budget_status', read_only=True, allow_null=True)


def serialize_projects(projects):
    user_ids = set()
    for project in projects:
        user_ids.add(project.created_by)
        user_ids.update(project.members)
    context = {'users': users_by_id(user_ids)}
    return ProjectSerializer(projects, many=True, context=context).data


def serialize_project(project):
    return serialize_projects([project])[0]
