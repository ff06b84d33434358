from django.contrib import admin
from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('name', 'budget', 'created_by', 'start_date', 'end_date', 'updated_at')
    list_filter = ('start_date',)
    search_fields = ('name', 'description', 'created_by__username')
    raw_id_fields = ('created_by',)
    filter_horizontal = ('members',)

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        # Owner stays a member even when edited through the admin
        form.instance.members.add(form.instance.created_by)
