from rest_framework import serializers

from .models import User
from .serializers import UserSummarySerializer


def users_by_id(user_ids):
    """Load the users referenced by a payload in one query."""
    ids = {user_id for user_id in user_ids if user_id is not None}
    return User.objects.in_bulk(ids) if ids else {}


class UserRefField(serializers.Field):
    """
    Renders a user id as ``{id, name, email}`` using the ``users`` map found
    in the serializer context. Unknown ids render as ``{id}`` only.
    """

    def __init__(self, **kwargs):
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, user_id):
        users = self.context.get('users') or {}
        user = users.get(user_id)
        if user is None:
            return {'id': user_id}
        return UserSummarySerializer(user).data
