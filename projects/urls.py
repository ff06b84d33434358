from django.urls import path
from . import views

urlpatterns = [
    path('', views.ProjectListCreateView.as_view(), name='project-list-create'),
    path('<uuid:pk>/', views.ProjectDetailView.as_view(), name='project-detail'),
    path('<uuid:pk>/members/', views.ProjectMemberView.as_view(), name='project-members'),
    path('<uuid:pk>/members/<int:user_id>/',
         views.ProjectMemberDetailView.as_view(), name='project-member-detail'),
]
