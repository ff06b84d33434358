"""
Login by username or email address.

Both simplejwt's token view and the Django admin pass the identifier as
``username``; an exact username match wins over a case-insensitive email match.
"""
from django.contrib.auth.backends import ModelBackend
from django.db.models import Case, IntegerField, Q, Value, When

from .models import User


class UsernameOrEmailBackend(ModelBackend):

    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get(User.USERNAME_FIELD) or "").strip()
        if not identifier or not password:
            return None

        user = (
            User.objects
            .filter(Q(username=identifier) | Q(email__iexact=identifier))
            .annotate(exact_username=Case(
                When(username=identifier, then=Value(0)),
                default=Value(1),
                output_field=IntegerField(),
            ))
            .order_by('exact_username', 'pk')
            .first()
        )
        if user is None:
            # Same hashing cost as a wrong password
            User().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
