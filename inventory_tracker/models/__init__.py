from inventory_tracker.models.invoice import Invoice
from inventory_tracker.models.item import Item
from inventory_tracker.models.assignment import Assignment
from inventory_tracker.models.notification import Notification, NotificationType, NotificationPriority

__all__ = [
    "Invoice",
    "Item",
    "Assignment",
    "Notification",
    "NotificationType",
    "NotificationPriority",
]
