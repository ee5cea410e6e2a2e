import enum
from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, Index
from inventory_tracker.core.database import Base, utcnow


class NotificationType(str, enum.Enum):
    LOW_STOCK = "low_stock"
    REORDER_SUGGESTION = "reorder_suggestion"
    ASSIGNMENT_REMINDER = "assignment_reminder"
    INVOICE_APPROVAL = "invoice_approval"


class NotificationPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_type_related", "type", "related_id", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, default=NotificationPriority.MEDIUM.value)
    is_read = Column(Boolean, nullable=False, default=False)
    # item, assignment or invoice id depending on type; not a foreign key
    related_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
