import os
from datetime import date
from fastapi import UploadFile
from loguru import logger
from inventory_tracker.core.config import Settings
from inventory_tracker.core.errors import InsufficientQuantityError, InventoryError, NotFoundError, ValidationFailed
from inventory_tracker.models import Invoice, Item, Assignment
from inventory_tracker.schemas.assignment import AssignmentCreate, AssignmentResponse, RecentAssignmentResponse
from inventory_tracker.schemas.dashboard import DashboardMetrics
from inventory_tracker.schemas.invoice import InvoiceCreate
from inventory_tracker.schemas.item import ItemCreate, ItemSummary
from inventory_tracker.services.uploads import save_invoice_file
from inventory_tracker.storage import InventoryStorage

LOW_STOCK_THRESHOLD = 5
RECENT_ASSIGNMENTS_LIMIT = 5


def parse_purchase_date(value: str) -> date:
    from dateutil.parser import parse as parse_date

    try:
        return parse_date(value).date()
    except (ValueError, TypeError, OverflowError):
        raise ValidationFailed(f"Invalid date: {value}", field="purchaseDate")


def _required(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailed(f"{field} is required", field=field)
    return value


async def create_invoice(
    storage: InventoryStorage,
    settings: Settings,
    invoice_number: str,
    vendor_name: str,
    purchase_date: str,
    file: UploadFile | None = None,
) -> Invoice:
    data = InvoiceCreate(
        invoice_number=_required(invoice_number, "invoiceNumber"),
        vendor_name=_required(vendor_name, "vendorName"),
        purchase_date=parse_purchase_date(_required(purchase_date, "purchaseDate")),
    )
    if file is not None and file.filename:
        data.file_name, data.file_path = await save_invoice_file(file, settings)

    try:
        invoice = await storage.create_invoice(data)
    except InventoryError:
        # a rejected invoice keeps no file on disk
        if data.file_path and os.path.exists(data.file_path):
            os.remove(data.file_path)
        raise
    logger.info(f"Invoice {invoice.invoice_number} created (id={invoice.id}, file={invoice.file_name})")
    return invoice


async def create_items(storage: InventoryStorage, payloads: list[ItemCreate]) -> list[Item]:
    for invoice_id in {p.invoice_id for p in payloads}:
        if await storage.get_invoice(invoice_id) is None:
            raise NotFoundError("Invoice", invoice_id)

    created = [await storage.create_item(payload) for payload in payloads]
    logger.info(f"Created {len(created)} item(s): {[item.id for item in created]}")
    return created


async def create_assignment(storage: InventoryStorage, payload: AssignmentCreate) -> Assignment:
    try:
        assignment = await storage.create_assignment(payload)
    except InsufficientQuantityError as e:
        logger.warning(
            f"Rejected assignment of {e.requested} x item {e.item_id} to {payload.assigned_to}: "
            f"only {e.available} available"
        )
        raise
    logger.info(
        f"Assigned {assignment.quantity} x item {assignment.item_id} to {assignment.assigned_to} "
        f"(assignment {assignment.id})"
    )
    return assignment


async def low_stock_items(storage: InventoryStorage) -> list[Item]:
    return [item for item in await storage.list_items() if item.quantity_available < LOW_STOCK_THRESHOLD]


async def recent_assignments(
    storage: InventoryStorage, limit: int = RECENT_ASSIGNMENTS_LIMIT
) -> list[RecentAssignmentResponse]:
    assignments = await storage.list_assignments()
    items = {item.id: item for item in await storage.list_items()}

    newest = sorted(assignments, key=lambda a: (a.assignment_date, a.id), reverse=True)[:limit]
    result = []
    for assignment in newest:
        item = items.get(assignment.item_id)
        result.append(
            RecentAssignmentResponse(
                **AssignmentResponse.model_validate(assignment).model_dump(),
                item=ItemSummary(name=item.name, category=item.category) if item else None,
            )
        )
    return result


async def dashboard_metrics(storage: InventoryStorage) -> DashboardMetrics:
    items = await storage.list_items()
    assignments = await storage.list_assignments()
    return DashboardMetrics(
        total_items=sum(item.quantity_purchased for item in items),
        available_items=sum(item.quantity_available for item in items),
        assigned_items=sum(a.quantity for a in assignments),
        low_stock_items=sum(1 for item in items if item.quantity_available < LOW_STOCK_THRESHOLD),
    )
