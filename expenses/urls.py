from django.urls import path
from . import views

urlpatterns = [
    path('', views.ExpenseCreateView.as_view(), name='expense-create'),
    path('<uuid:pk>/', views.ExpenseDetailView.as_view(), name='expense-detail'),
    path('project/<uuid:project_id>/',
         views.ProjectExpenseListView.as_view(), name='project-expense-list'),
    path('summary/project/<uuid:project_id>/',
         views.ProjectExpenseSummaryView.as_view(), name='project-expense-summary'),
]
