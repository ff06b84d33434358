from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.responses import envelope
from .permissions import HasAppRole
from .serializers import ProfileSerializer, RegisterSerializer


class RegisterView(APIView):
    """Public sign-up: username, password, optional email and name."""

    permission_classes = (AllowAny,)
    failure_messages = {"post": "Failed to register user"}

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return envelope(serializer.to_representation(user), status=status.HTTP_201_CREATED)


class ProfileView(APIView):
    """GET or PATCH the caller's own username, email and display name."""

    permission_classes = (HasAppRole,)
    failure_messages = {
        "get": "Failed to fetch profile",
        "patch": "Failed to update profile",
    }

    def get(self, request):
        return envelope(ProfileSerializer(request.user).data)

    def patch(self, request):
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return envelope(serializer.data)
