"""
Periodic notification scan.

Each check reads the current items/assignments/invoices, applies its
predicate, and writes at most one notification per related record inside
that check's de-duplication window. Checks write disjoint
(type, related_id) keys, so they run concurrently; each check holds its
own lock so overlapping runs of the same check cannot double-emit.
"""

import asyncio
from datetime import datetime, time, timedelta
from loguru import logger
from inventory_tracker.core.database import utcnow
from inventory_tracker.models import Notification, NotificationType, NotificationPriority
from inventory_tracker.schemas.notification import NotificationCreate, ScanSummary
from inventory_tracker.storage import InventoryStorage

LOW_STOCK_LIMIT = 5
URGENT_STOCK_LEVEL = 2
REMINDER_AGE = timedelta(days=30)
REMINDER_MIN_UNIT_PRICE = 100
APPROVAL_THRESHOLD = 1000
HIGH_VALUE_THRESHOLD = 5000

DEDUP_WINDOWS = {
    NotificationType.LOW_STOCK: timedelta(hours=24),
    NotificationType.REORDER_SUGGESTION: timedelta(hours=48),
    NotificationType.ASSIGNMENT_REMINDER: timedelta(days=7),
    NotificationType.INVOICE_APPROVAL: timedelta(hours=24),
}


class NotificationScanner:
    def __init__(self, storage: InventoryStorage):
        self.storage = storage
        self._locks = {notification_type: asyncio.Lock() for notification_type in NotificationType}

    async def _emit_unless_recent(self, data: NotificationCreate, now: datetime) -> Notification | None:
        since = now - DEDUP_WINDOWS[data.type]
        if await self.storage.find_recent_notification(data.type, data.related_id, since) is not None:
            return None
        notification = await self.storage.create_notification(data)
        logger.info(f"Notification {notification.id} [{data.type.value}/{data.priority.value}]: {data.message}")
        return notification

    async def check_low_stock(self, now: datetime | None = None) -> list[Notification]:
        now = now or utcnow()
        created = []
        async with self._locks[NotificationType.LOW_STOCK]:
            for item in await self.storage.list_items():
                if not 0 < item.quantity_available < LOW_STOCK_LIMIT:
                    continue
                data = NotificationCreate(
                    type=NotificationType.LOW_STOCK,
                    title="Low Stock Alert",
                    message=f"{item.name} is running low ({item.quantity_available} remaining)",
                    priority=(
                        NotificationPriority.URGENT
                        if item.quantity_available <= URGENT_STOCK_LEVEL
                        else NotificationPriority.HIGH
                    ),
                    related_id=item.id,
                    created_at=now,
                )
                if notification := await self._emit_unless_recent(data, now):
                    created.append(notification)
        return created

    async def check_reorder_suggestions(self, now: datetime | None = None) -> list[Notification]:
        now = now or utcnow()
        created = []
        async with self._locks[NotificationType.REORDER_SUGGESTION]:
            for item in await self.storage.list_items():
                if item.quantity_available != 0:
                    continue
                data = NotificationCreate(
                    type=NotificationType.REORDER_SUGGESTION,
                    title="Reorder Suggestion",
                    message=f"{item.name} is out of stock. Consider reordering to maintain inventory levels.",
                    priority=NotificationPriority.MEDIUM,
                    related_id=item.id,
                    created_at=now,
                )
                if notification := await self._emit_unless_recent(data, now):
                    created.append(notification)
        return created

    async def check_assignment_reminders(self, now: datetime | None = None) -> list[Notification]:
        now = now or utcnow()
        cutoff = now - REMINDER_AGE
        created = []
        async with self._locks[NotificationType.ASSIGNMENT_REMINDER]:
            items = {item.id: item for item in await self.storage.list_items()}
            for assignment in await self.storage.list_assignments():
                item = items.get(assignment.item_id)
                if item is None or item.unit_price <= REMINDER_MIN_UNIT_PRICE:
                    continue
                if datetime.combine(assignment.assignment_date, time.min) >= cutoff:
                    continue
                data = NotificationCreate(
                    type=NotificationType.ASSIGNMENT_REMINDER,
                    title="Assignment Follow-up",
                    message=(
                        f"{item.name} assigned to {assignment.assigned_to} on "
                        f"{assignment.assignment_date.isoformat()}. Consider checking item status."
                    ),
                    priority=NotificationPriority.LOW,
                    related_id=assignment.id,
                    created_at=now,
                )
                if notification := await self._emit_unless_recent(data, now):
                    created.append(notification)
        return created

    async def check_invoice_approval(self, now: datetime | None = None) -> list[Notification]:
        now = now or utcnow()
        created = []
        async with self._locks[NotificationType.INVOICE_APPROVAL]:
            totals: dict[int, float] = {}
            for item in await self.storage.list_items():
                totals[item.invoice_id] = totals.get(item.invoice_id, 0) + item.unit_price * item.quantity_purchased

            for invoice in await self.storage.list_invoices():
                total = totals.get(invoice.id, 0)
                if total <= APPROVAL_THRESHOLD:
                    continue
                data = NotificationCreate(
                    type=NotificationType.INVOICE_APPROVAL,
                    title="High-Value Invoice",
                    message=(
                        f"Invoice {invoice.invoice_number} from {invoice.vendor_name} has a total value of "
                        f"${total:.2f}. Consider review process."
                    ),
                    priority=NotificationPriority.HIGH if total > HIGH_VALUE_THRESHOLD else NotificationPriority.MEDIUM,
                    related_id=invoice.id,
                    created_at=now,
                )
                if notification := await self._emit_unless_recent(data, now):
                    created.append(notification)
        return created

    async def run_all_checks(self, now: datetime | None = None) -> ScanSummary:
        now = now or utcnow()
        checks = {
            NotificationType.LOW_STOCK.value: self.check_low_stock,
            NotificationType.REORDER_SUGGESTION.value: self.check_reorder_suggestions,
            NotificationType.ASSIGNMENT_REMINDER.value: self.check_assignment_reminders,
            NotificationType.INVOICE_APPROVAL.value: self.check_invoice_approval,
        }

        async def isolated(name, check):
            try:
                return name, len(await check(now))
            except Exception:
                logger.exception(f"Notification check {name} failed")
                return name, None

        results = await asyncio.gather(*(isolated(name, check) for name, check in checks.items()))
        summary = ScanSummary(
            created={name: count for name, count in results if count is not None},
            failed=[name for name, count in results if count is None],
        )
        logger.info(f"Notification scan finished: created={summary.created} failed={summary.failed}")
        return summary
