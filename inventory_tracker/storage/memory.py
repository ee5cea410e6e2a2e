import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from inventory_tracker.core.database import utcnow
from inventory_tracker.core.errors import DuplicateInvoiceError, InsufficientQuantityError, NotFoundError
from inventory_tracker.models import Invoice, Item, Assignment, Notification, NotificationType
from inventory_tracker.schemas.invoice import InvoiceCreate
from inventory_tracker.schemas.item import ItemCreate
from inventory_tracker.schemas.assignment import AssignmentCreate
from inventory_tracker.schemas.notification import NotificationCreate
from inventory_tracker.storage.base import InventoryStorage


@dataclass
class MemoryTables:
    invoices: dict[int, Invoice] = field(default_factory=dict)
    items: dict[int, Item] = field(default_factory=dict)
    assignments: dict[int, Assignment] = field(default_factory=dict)
    notifications: dict[int, Notification] = field(default_factory=dict)
    next_ids: dict[str, int] = field(default_factory=lambda: defaultdict(lambda: 1))

    def next_id(self, table: str) -> int:
        value = self.next_ids[table]
        self.next_ids[table] = value + 1
        return value


def _detached(row):
    """Copy of a stored row; changing it leaves the stored row alone."""
    if row is None:
        return None
    return type(row)(**{attr.key: getattr(row, attr.key) for attr in row.__mapper__.column_attrs})


def _newest_first(notifications) -> list[Notification]:
    return [_detached(n) for n in sorted(notifications, key=lambda n: (n.created_at, n.id), reverse=True)]


class MemoryStorage(InventoryStorage):
    """Keeps everything in per-instance dicts. Data lives as long as the instance does."""

    def __init__(self):
        self.tables = MemoryTables()
        self._item_locks: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._write_lock = asyncio.Lock()

    async def create_invoice(self, data: InvoiceCreate) -> Invoice:
        async with self._write_lock:
            if any(inv.invoice_number == data.invoice_number for inv in self.tables.invoices.values()):
                raise DuplicateInvoiceError(data.invoice_number)
            invoice = Invoice(id=self.tables.next_id("invoices"), created_at=utcnow(), **data.model_dump())
            self.tables.invoices[invoice.id] = invoice
            return _detached(invoice)

    async def list_invoices(self) -> list[Invoice]:
        return [_detached(inv) for inv in self.tables.invoices.values()]

    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        return _detached(self.tables.invoices.get(invoice_id))

    async def create_item(self, data: ItemCreate) -> Item:
        async with self._write_lock:
            item = Item(
                id=self.tables.next_id("items"),
                quantity_available=data.quantity_purchased,
                created_at=utcnow(),
                **data.model_dump(),
            )
            self.tables.items[item.id] = item
            return _detached(item)

    async def list_items(self) -> list[Item]:
        return [_detached(item) for item in self.tables.items.values()]

    async def get_item(self, item_id: int) -> Item | None:
        return _detached(self.tables.items.get(item_id))

    async def list_items_by_invoice(self, invoice_id: int) -> list[Item]:
        return [_detached(item) for item in self.tables.items.values() if item.invoice_id == invoice_id]

    async def create_assignment(self, data: AssignmentCreate) -> Assignment:
        async with self._item_locks[data.item_id]:
            item = self.tables.items.get(data.item_id)
            if item is None:
                raise NotFoundError("Item", data.item_id)
            if data.quantity > item.quantity_available:
                raise InsufficientQuantityError(item.id, data.quantity, item.quantity_available)

            assignment = Assignment(id=self.tables.next_id("assignments"), created_at=utcnow(), **data.model_dump())
            self.tables.assignments[assignment.id] = assignment
            item.quantity_available -= data.quantity
            return _detached(assignment)

    async def list_assignments(self) -> list[Assignment]:
        return [_detached(a) for a in self.tables.assignments.values()]

    async def list_assignments_by_item(self, item_id: int) -> list[Assignment]:
        return [_detached(a) for a in self.tables.assignments.values() if a.item_id == item_id]

    async def create_notification(self, data: NotificationCreate) -> Notification:
        async with self._write_lock:
            values = data.model_dump(mode="json", exclude={"created_at"})
            notification = Notification(
                id=self.tables.next_id("notifications"),
                is_read=False,
                created_at=data.created_at or utcnow(),
                **values,
            )
            self.tables.notifications[notification.id] = notification
            return _detached(notification)

    async def list_notifications(self) -> list[Notification]:
        return _newest_first(self.tables.notifications.values())

    async def list_unread_notifications(self) -> list[Notification]:
        return _newest_first(n for n in self.tables.notifications.values() if not n.is_read)

    async def find_recent_notification(
        self, notification_type: NotificationType, related_id: int, since: datetime
    ) -> Notification | None:
        for notification in self.tables.notifications.values():
            if (
                notification.type == notification_type.value
                and notification.related_id == related_id
                and notification.created_at > since
            ):
                return _detached(notification)
        return None

    async def mark_notification_read(self, notification_id: int) -> Notification | None:
        notification = self.tables.notifications.get(notification_id)
        if notification is not None:
            notification.is_read = True
        return _detached(notification)

    async def mark_all_notifications_read(self) -> int:
        updated = 0
        for notification in self.tables.notifications.values():
            if not notification.is_read:
                notification.is_read = True
                updated += 1
        return updated
