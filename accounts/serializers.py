from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import Role, User


def ensure_unique(field, value, exclude=None):
    """Reject ``value`` when another account already uses it for ``field``."""
    lookup = {f"{field}__iexact": value}
    taken = User.objects.filter(**lookup)
    if exclude is not None:
        taken = taken.exclude(pk=exclude.pk)
    if taken.exists():
        raise serializers.ValidationError(f"This {field} is already in use.")
    return value


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user shape embedded in project and expense payloads."""

    name = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ("id", "name", "email")
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    Self-service sign-up. New accounts get the "user" role and no admin access;
    the password must pass AUTH_PASSWORD_VALIDATORS.
    """
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    password = serializers.CharField(max_length=128, write_only=True,
                                     style={"input_type": "password"})

    def validate_username(self, value):
        return ensure_unique("username", value)

    def validate_email(self, value):
        value = value.strip()
        return ensure_unique("email", value) if value else value

    def validate(self, attrs):
        candidate = User(username=attrs["username"], email=attrs["email"], name=attrs["name"])
        try:
            password_validation.validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data["name"].strip(),
            role=Role.USER,
        )

    def to_representation(self, instance):
        return UserSummarySerializer(instance).data


class ProfileSerializer(serializers.ModelSerializer):
    """The caller's own account. Role is managed by admins only."""

    class Meta:
        model = User
        fields = ("id", "username", "email", "name", "role")
        read_only_fields = ("id", "role")

    def validate_username(self, value):
        return ensure_unique("username", value, exclude=self.instance)

    def validate_email(self, value):
        value = (value or "").strip()
        return ensure_unique("email", value, exclude=self.instance) if value else value
