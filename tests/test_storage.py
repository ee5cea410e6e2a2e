import asyncio
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import event

from inventory_tracker.core.errors import DuplicateInvoiceError, InsufficientQuantityError, NotFoundError
from inventory_tracker.models import NotificationType, NotificationPriority
from inventory_tracker.schemas.assignment import AssignmentCreate
from inventory_tracker.schemas.invoice import InvoiceCreate
from inventory_tracker.schemas.item import ItemCreate
from inventory_tracker.schemas.notification import NotificationCreate
from inventory_tracker.storage import DatabaseStorage


async def _seed_item(storage, quantity=10, unit_price=20.0, invoice_number="INV-1"):
    invoice = await storage.create_invoice(
        InvoiceCreate(invoice_number=invoice_number, vendor_name="Acme", purchase_date=date(2026, 9, 1))
    )
    item = await storage.create_item(
        ItemCreate(
            name="Chair",
            category="Furniture",
            quantity_purchased=quantity,
            unit_price=unit_price,
            invoice_id=invoice.id,
        )
    )
    return invoice, item


def _assign(item_id, quantity):
    return AssignmentCreate(item_id=item_id, quantity=quantity, assigned_to="Sam", assignment_date=date(2026, 10, 1))


def test_create_item_starts_fully_available(run_scenario):
    async def scenario(storage):
        invoice, item = await _seed_item(storage, quantity=7)
        assert item.quantity_available == 7
        assert [i.id for i in await storage.list_items_by_invoice(invoice.id)] == [item.id]
        assert await storage.list_items_by_invoice(invoice.id + 1) == []

    run_scenario(scenario)


def test_duplicate_invoice_number_rejected(run_scenario):
    async def scenario(storage):
        await _seed_item(storage, invoice_number="INV-9")
        with pytest.raises(DuplicateInvoiceError):
            await storage.create_invoice(
                InvoiceCreate(invoice_number="INV-9", vendor_name="Other", purchase_date=date(2026, 9, 2))
            )
        assert len(await storage.list_invoices()) == 1

    run_scenario(scenario)


def test_assignment_decrements_available(run_scenario):
    async def scenario(storage):
        _, item = await _seed_item(storage, quantity=10)
        assignment = await storage.create_assignment(_assign(item.id, 4))
        assert assignment.id is not None
        refreshed = await storage.get_item(item.id)
        assert refreshed.quantity_available == 6
        assert refreshed.quantity_purchased == 10
        assert [a.id for a in await storage.list_assignments_by_item(item.id)] == [assignment.id]

    run_scenario(scenario)


def test_assignment_of_everything_leaves_zero(run_scenario):
    async def scenario(storage):
        _, item = await _seed_item(storage, quantity=3)
        await storage.create_assignment(_assign(item.id, 3))
        assert (await storage.get_item(item.id)).quantity_available == 0

    run_scenario(scenario)


def test_over_allocation_rejected_without_side_effects(run_scenario):
    async def scenario(storage):
        _, item = await _seed_item(storage, quantity=3)
        with pytest.raises(InsufficientQuantityError) as excinfo:
            await storage.create_assignment(_assign(item.id, 5))
        assert excinfo.value.available == 3
        assert (await storage.get_item(item.id)).quantity_available == 3
        assert await storage.list_assignments() == []

    run_scenario(scenario)


def test_assignment_for_missing_item(run_scenario):
    async def scenario(storage):
        with pytest.raises(NotFoundError):
            await storage.create_assignment(_assign(999, 1))
        assert await storage.list_assignments() == []

    run_scenario(scenario)


def test_concurrent_assignments_never_oversell(run_scenario):
    async def scenario(storage):
        _, item = await _seed_item(storage, quantity=3)
        results = await asyncio.gather(
            *(storage.create_assignment(_assign(item.id, 1)) for _ in range(5)),
            return_exceptions=True,
        )
        succeeded = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, InsufficientQuantityError)]
        assert len(succeeded) == 3
        assert len(rejected) == 2
        assert (await storage.get_item(item.id)).quantity_available == 0
        assert len(await storage.list_assignments()) == 3

    run_scenario(scenario)


def test_available_stays_within_bounds_over_sequence(run_scenario):
    async def scenario(storage):
        _, item = await _seed_item(storage, quantity=10)
        for quantity in (4, 7, 3, 1, 2, 1):
            try:
                await storage.create_assignment(_assign(item.id, quantity))
            except InsufficientQuantityError:
                pass
            current = await storage.get_item(item.id)
            assert 0 <= current.quantity_available <= current.quantity_purchased
        assert (await storage.get_item(item.id)).quantity_available == 0
        assert sum(a.quantity for a in await storage.list_assignments()) == 10

    run_scenario(scenario)


def test_notifications_listed_newest_first(run_scenario):
    async def scenario(storage):
        base = datetime(2026, 10, 1, 12, 0)
        for offset, related_id in ((0, 1), (2, 2), (1, 3)):
            await storage.create_notification(
                NotificationCreate(
                    type=NotificationType.LOW_STOCK,
                    title="Low Stock Alert",
                    message="x",
                    priority=NotificationPriority.HIGH,
                    related_id=related_id,
                    created_at=base + timedelta(hours=offset),
                )
            )
        listed = await storage.list_notifications()
        assert [n.related_id for n in listed] == [2, 3, 1]
        assert all(n.is_read is False for n in listed)

    run_scenario(scenario)


def test_find_recent_notification_respects_window(run_scenario):
    async def scenario(storage):
        created_at = datetime(2026, 10, 1, 12, 0)
        await storage.create_notification(
            NotificationCreate(
                type=NotificationType.REORDER_SUGGESTION,
                title="Reorder Suggestion",
                message="x",
                related_id=7,
                created_at=created_at,
            )
        )
        found = await storage.find_recent_notification(
            NotificationType.REORDER_SUGGESTION, 7, created_at - timedelta(hours=1)
        )
        assert found is not None
        assert await storage.find_recent_notification(
            NotificationType.REORDER_SUGGESTION, 7, created_at + timedelta(minutes=1)
        ) is None
        assert await storage.find_recent_notification(
            NotificationType.LOW_STOCK, 7, created_at - timedelta(hours=1)
        ) is None
        assert await storage.find_recent_notification(
            NotificationType.REORDER_SUGGESTION, 8, created_at - timedelta(hours=1)
        ) is None

    run_scenario(scenario)


def test_mark_read_is_one_way_and_idempotent(run_scenario):
    async def scenario(storage):
        notifications = [
            await storage.create_notification(
                NotificationCreate(type=NotificationType.LOW_STOCK, title="t", message="m", related_id=i)
            )
            for i in range(3)
        ]
        first = await storage.mark_notification_read(notifications[0].id)
        assert first.is_read is True
        again = await storage.mark_notification_read(notifications[0].id)
        assert again.is_read is True
        assert len(await storage.list_unread_notifications()) == 2
        assert await storage.mark_notification_read(12345) is None

        assert await storage.mark_all_notifications_read() == 2
        assert await storage.list_unread_notifications() == []
        assert await storage.mark_all_notifications_read() == 0

    run_scenario(scenario)


def test_returned_rows_are_copies(run_scenario):
    async def scenario(storage):
        invoice, item = await _seed_item(storage, quantity=10)
        item.quantity_available = 0
        item.name = "Renamed"
        (await storage.get_invoice(invoice.id)).vendor_name = "Changed"

        stored = await storage.get_item(item.id)
        assert stored.quantity_available == 10
        assert stored.name == "Chair"
        assert (await storage.list_invoices())[0].vendor_name == "Acme"

    run_scenario(scenario)


def test_sqlite_reads_share_the_lock_and_writes_take_it(tmp_path):
    async def main():
        storage = DatabaseStorage(f"sqlite+aiosqlite:///{tmp_path / 'locks.db'}")
        await storage.startup()
        begins = []

        @event.listens_for(storage.engine.sync_engine, "before_cursor_execute")
        def record(conn, cursor, statement, parameters, context, executemany):
            if statement.startswith("BEGIN"):
                begins.append(statement)

        try:
            _, item = await _seed_item(storage)
            assert "BEGIN IMMEDIATE" in begins

            begins.clear()
            await storage.list_items()
            await storage.get_item(item.id)
            await storage.list_notifications()
            assert begins == ["BEGIN", "BEGIN", "BEGIN"]

            begins.clear()
            await storage.create_assignment(_assign(item.id, 1))
            assert begins[0] == "BEGIN IMMEDIATE"
        finally:
            await storage.shutdown()

    asyncio.run(main())
