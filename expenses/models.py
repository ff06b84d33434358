from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel
from projects.models import Project


class ExpenseCategory(models.TextChoices):
    MARKETING = 'marketing', 'Marketing'
    DEVELOPMENT = 'development', 'Development'
    DESIGN = 'design', 'Design'
    OPERATIONS = 'operations', 'Operations'
    HR = 'hr', 'HR'
    OTHER = 'other', 'Other'


class Expense(TimeStampedModel):
    """Single spend record booked against a project."""
    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.OTHER
    )
    date = models.DateTimeField(default=timezone.now, db_index=True)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='expenses')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='created_expenses'
    )

    class Meta:
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['project', '-created_at'], name='expense_project_created_idx'),
        ]

    def __str__(self):
        return f"{self.get_category_display()} - {self.amount} ({self.date:%Y-%m-%d})"
