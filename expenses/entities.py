# expenses/entities.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID


@dataclass
class ExpenseEntity:
    id: Optional[UUID]
    description: str
    amount: Decimal
    category: str
    project_id: UUID
    created_by: int
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal
    count: int
