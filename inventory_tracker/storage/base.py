"""
Storage interface shared by the in-memory and database backends.

The HTTP layer and the notification scanner only ever talk to
``InventoryStorage``; which implementation sits behind it is a
configuration choice (``STORAGE_BACKEND``).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from inventory_tracker.models import Invoice, Item, Assignment, Notification, NotificationType
from inventory_tracker.schemas.invoice import InvoiceCreate
from inventory_tracker.schemas.item import ItemCreate
from inventory_tracker.schemas.assignment import AssignmentCreate
from inventory_tracker.schemas.notification import NotificationCreate


class InventoryStorage(ABC):
    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    # Invoices

    @abstractmethod
    async def create_invoice(self, data: InvoiceCreate) -> Invoice:
        """Persist a new invoice. Raises DuplicateInvoiceError if the number is taken."""

    @abstractmethod
    async def list_invoices(self) -> list[Invoice]: ...

    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice | None: ...

    # Items

    @abstractmethod
    async def create_item(self, data: ItemCreate) -> Item:
        """Persist a new item with quantity_available equal to quantity_purchased."""

    @abstractmethod
    async def list_items(self) -> list[Item]: ...

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None: ...

    @abstractmethod
    async def list_items_by_invoice(self, invoice_id: int) -> list[Item]: ...

    # Assignments

    @abstractmethod
    async def create_assignment(self, data: AssignmentCreate) -> Assignment:
        """
        Record an assignment and decrement the item's available quantity as one unit.

        Raises NotFoundError when the item does not exist and
        InsufficientQuantityError when fewer than ``data.quantity`` units are
        available at the moment of the write. Neither failure changes any data.
        """

    @abstractmethod
    async def list_assignments(self) -> list[Assignment]: ...

    @abstractmethod
    async def list_assignments_by_item(self, item_id: int) -> list[Assignment]: ...

    # Notifications

    @abstractmethod
    async def create_notification(self, data: NotificationCreate) -> Notification: ...

    @abstractmethod
    async def list_notifications(self) -> list[Notification]:
        """All notifications, newest first."""

    @abstractmethod
    async def list_unread_notifications(self) -> list[Notification]:
        """Unread notifications, newest first."""

    @abstractmethod
    async def find_recent_notification(
        self, notification_type: NotificationType, related_id: int, since: datetime
    ) -> Notification | None:
        """Return a notification of ``notification_type`` for ``related_id`` created after ``since``, if any."""

    @abstractmethod
    async def mark_notification_read(self, notification_id: int) -> Notification | None:
        """Flip is_read to True. Already-read notifications are returned unchanged."""

    @abstractmethod
    async def mark_all_notifications_read(self) -> int:
        """Mark every unread notification read and return how many changed."""
