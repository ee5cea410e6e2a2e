from datetime import datetime
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from inventory_tracker.core.database import WRITE_OPTIONS, Base, create_engine_and_session_factory, utcnow
from inventory_tracker.core.errors import (
    DuplicateInvoiceError,
    InsufficientQuantityError,
    InventoryError,
    NotFoundError,
    StorageError,
)
from inventory_tracker.models import Invoice, Item, Assignment, Notification, NotificationType
from inventory_tracker.schemas.invoice import InvoiceCreate
from inventory_tracker.schemas.item import ItemCreate
from inventory_tracker.schemas.assignment import AssignmentCreate
from inventory_tracker.schemas.notification import NotificationCreate
from inventory_tracker.storage.base import InventoryStorage


class DatabaseStorage(InventoryStorage):
    """SQLAlchemy-backed storage. Each call runs in its own session and transaction."""

    def __init__(self, database_url: str, echo: bool = False):
        self.engine, self.session_factory = create_engine_and_session_factory(database_url, echo=echo)

    async def startup(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def shutdown(self) -> None:
        await self.engine.dispose()

    async def _scalars(self, query) -> list:
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def _get(self, model, obj_id: int):
        try:
            async with self.session_factory() as session:
                return await session.get(model, obj_id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def _add(self, obj):
        try:
            async with self.session_factory() as session:
                await session.connection(execution_options=WRITE_OPTIONS)
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
                return obj
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    # Invoices

    async def create_invoice(self, data: InvoiceCreate) -> Invoice:
        invoice = Invoice(**data.model_dump())
        try:
            async with self.session_factory() as session:
                await session.connection(execution_options=WRITE_OPTIONS)
                existing = await session.execute(
                    select(Invoice.id).where(Invoice.invoice_number == data.invoice_number)
                )
                if existing.scalar_one_or_none() is not None:
                    raise DuplicateInvoiceError(data.invoice_number)
                session.add(invoice)
                await session.commit()
                await session.refresh(invoice)
                return invoice
        except IntegrityError as e:
            # lost a race with a concurrent insert of the same number
            raise DuplicateInvoiceError(data.invoice_number) from e
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def list_invoices(self) -> list[Invoice]:
        return await self._scalars(select(Invoice).order_by(Invoice.id))

    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        return await self._get(Invoice, invoice_id)

    # Items

    async def create_item(self, data: ItemCreate) -> Item:
        return await self._add(Item(quantity_available=data.quantity_purchased, **data.model_dump()))

    async def list_items(self) -> list[Item]:
        return await self._scalars(select(Item).order_by(Item.id))

    async def get_item(self, item_id: int) -> Item | None:
        return await self._get(Item, item_id)

    async def list_items_by_invoice(self, invoice_id: int) -> list[Item]:
        return await self._scalars(select(Item).where(Item.invoice_id == invoice_id).order_by(Item.id))

    # Assignments

    async def create_assignment(self, data: AssignmentCreate) -> Assignment:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.connection(execution_options=WRITE_OPTIONS)
                    # availability is re-checked by the WHERE clause at write time;
                    # zero rows means the item is missing or short
                    result = await session.execute(
                        update(Item)
                        .where(Item.id == data.item_id, Item.quantity_available >= data.quantity)
                        .values(quantity_available=Item.quantity_available - data.quantity)
                        .execution_options(synchronize_session=False)
                    )
                    if result.rowcount == 0:
                        available = await session.scalar(
                            select(Item.quantity_available).where(Item.id == data.item_id)
                        )
                        if available is None:
                            raise NotFoundError("Item", data.item_id)
                        raise InsufficientQuantityError(data.item_id, data.quantity, available)

                    assignment = Assignment(**data.model_dump())
                    session.add(assignment)
                    await session.flush()
                await session.refresh(assignment)
                return assignment
        except InventoryError:
            raise
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def list_assignments(self) -> list[Assignment]:
        return await self._scalars(select(Assignment).order_by(Assignment.id))

    async def list_assignments_by_item(self, item_id: int) -> list[Assignment]:
        return await self._scalars(
            select(Assignment).where(Assignment.item_id == item_id).order_by(Assignment.id)
        )

    # Notifications

    async def create_notification(self, data: NotificationCreate) -> Notification:
        values = data.model_dump(mode="json", exclude={"created_at"})
        return await self._add(Notification(is_read=False, created_at=data.created_at or utcnow(), **values))

    async def list_notifications(self) -> list[Notification]:
        return await self._scalars(
            select(Notification).order_by(Notification.created_at.desc(), Notification.id.desc())
        )

    async def list_unread_notifications(self) -> list[Notification]:
        return await self._scalars(
            select(Notification)
            .where(Notification.is_read.is_(False))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )

    async def find_recent_notification(
        self, notification_type: NotificationType, related_id: int, since: datetime
    ) -> Notification | None:
        rows = await self._scalars(
            select(Notification)
            .where(
                Notification.type == notification_type.value,
                Notification.related_id == related_id,
                Notification.created_at > since,
            )
            .limit(1)
        )
        return rows[0] if rows else None

    async def mark_notification_read(self, notification_id: int) -> Notification | None:
        try:
            async with self.session_factory() as session:
                await session.connection(execution_options=WRITE_OPTIONS)
                notification = await session.get(Notification, notification_id)
                if notification is None:
                    return None
                if not notification.is_read:
                    notification.is_read = True
                    await session.commit()
                    await session.refresh(notification)
                return notification
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def mark_all_notifications_read(self) -> int:
        try:
            async with self.session_factory() as session:
                await session.connection(execution_options=WRITE_OPTIONS)
                result = await session.execute(
                    update(Notification)
                    .where(Notification.is_read.is_(False))
                    .values(is_read=True)
                    .execution_options(synchronize_session=False)
                )
                await session.commit()
                logger.debug(f"Marked {result.rowcount} notifications read")
                return result.rowcount
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
