# projects/entities.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from projects.services.budget import BudgetStatus


@dataclass
class ProjectEntity:
    id: Optional[UUID]
    name: str
    budget: Decimal
    created_by: int
    description: Optional[str] = None

    # Schedule
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    members: List[int] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Filled in by the service on reads, never persisted
    budget_status: Optional[BudgetStatus] = None

    def is_owner(self, user_id) -> bool:
        return self.created_by == user_id

    def is_member(self, user_id) -> bool:
        return user_id in self.members
