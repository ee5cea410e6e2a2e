from datetime import datetime, date
from typing import Optional
from pydantic import Field
from inventory_tracker.schemas.base import CamelModel
from inventory_tracker.schemas.item import ItemSummary


class AssignmentCreate(CamelModel):
    item_id: int
    quantity: int = Field(gt=0)
    assigned_to: str = Field(min_length=1)
    reason: Optional[str] = None
    assignment_date: date


class AssignmentResponse(CamelModel):
    id: int
    item_id: int
    quantity: int
    assigned_to: str
    reason: Optional[str] = None
    assignment_date: date
    created_at: datetime


class RecentAssignmentResponse(AssignmentResponse):
    item: Optional[ItemSummary] = None
