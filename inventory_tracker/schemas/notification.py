from datetime import datetime
from typing import Optional
from inventory_tracker.models.notification import NotificationType, NotificationPriority
from inventory_tracker.schemas.base import CamelModel


class NotificationCreate(CamelModel):
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    related_id: Optional[int] = None
    created_at: Optional[datetime] = None


class NotificationResponse(CamelModel):
    id: int
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    is_read: bool
    related_id: Optional[int] = None
    created_at: datetime


class MarkAllReadResponse(CamelModel):
    updated: int


class ScanSummary(CamelModel):
    created: dict[str, int]
    failed: list[str]
