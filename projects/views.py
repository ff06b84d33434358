from rest_framework import status
from rest_framework.views import APIView

from accounts.permissions import HasAppRole
from core.responses import envelope
from expenses.repositories import DjangoExpenseRepository
from .repositories import DjangoProjectRepository
from .serializers import (
    MemberInputSerializer,
    ProjectCreateInputSerializer,
    ProjectUpdateInputSerializer,
    serialize_project,
    serialize_projects,
)
from .services.project_service import ProjectService


def get_project_service():
    return ProjectService(DjangoProjectRepository(), DjangoExpenseRepository())


class ProjectListCreateView(APIView):
    """List projects the caller owns or belongs to, or create a project owned by the caller."""

    permission_classes = (HasAppRole,)
    failure_messages = {
        "get": "Failed to fetch projects",
        "post": "Failed to create project",
    }

    def get(self, request):
        projects = get_project_service().list_projects_for_user(request.user.id)
        return envelope(serialize_projects(projects))

    def post(self, request):
        serializer = ProjectCreateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = get_project_service().create_project(
            request.user.id, **serializer.validated_data
        )
        return envelope(serialize_project(project), status=status.HTTP_201_CREATED)


class ProjectDetailView(APIView):
    """
    GET for owners and members. PUT/PATCH and DELETE for the owner only;
    anyone else gets 404 so project existence is not revealed.
    """

    permission_classes = (HasAppRole,)
    failure_messages = {
        "get": "Failed to fetch project",
        "put": "Failed to update project",
        "patch": "Failed to update project",
        "delete": "Failed to delete project",
    }

    def get(self, request, pk):
        project = get_project_service().get_project(request.user.id, pk)
        return envelope(serialize_project(project))

    def put(self, request, pk):
        serializer = ProjectUpdateInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        project = get_project_service().update_project(
            request.user.id, pk, serializer.validated_data
        )
        return envelope(serialize_project(project))

    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        result = get_project_service().delete_project(request.user.id, pk)
        return envelope(result)


class ProjectMemberView(APIView):
    """POST {userId} to add a member to a project the caller owns."""

    permission_classes = (HasAppRole,)
    failure_messages = {"post": "Failed to add member to project"}

    def post(self, request, pk):
        serializer = MemberInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = get_project_service().add_member(
            request.user.id, pk, serializer.validated_data["user_id"]
        )
        return envelope(serialize_project(project))


class ProjectMemberDetailView(APIView):
    """DELETE a member (never the owner) from a project the caller owns."""

    permission_classes = (HasAppRole,)
    failure_messages = {"delete": "Failed to remove member from project"}

    def delete(self, request, pk, user_id: int):
        project = get_project_service().remove_member(request.user.id, pk, user_id)
        return envelope(serialize_project(project))
