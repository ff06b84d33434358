from django.contrib import admin
from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ('description', 'category', 'amount', 'date', 'project', 'created_by', 'created_at')
    list_filter = ('category', 'date')
    search_fields = ('description', 'project__name')
    raw_id_fields = ('project', 'created_by')
