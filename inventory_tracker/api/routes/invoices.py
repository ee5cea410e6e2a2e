import os
from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import FileResponse
from inventory_tracker.api.deps import get_app_settings, get_storage
from inventory_tracker.core.config import Settings
from inventory_tracker.core.errors import NotFoundError
from inventory_tracker.schemas.invoice import InvoiceResponse
from inventory_tracker.services import inventory
from inventory_tracker.storage import InventoryStorage

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    invoice_number: str = Form(..., alias="invoiceNumber"),
    vendor_name: str = Form(..., alias="vendorName"),
    purchase_date: str = Form(..., alias="purchaseDate"),
    invoice_file: UploadFile | None = File(None, alias="invoiceFile"),
    storage: InventoryStorage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return await inventory.create_invoice(
        storage,
        settings,
        invoice_number=invoice_number,
        vendor_name=vendor_name,
        purchase_date=purchase_date,
        file=invoice_file,
    )


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_invoices()


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: int, storage: InventoryStorage = Depends(get_storage)):
    invoice = await storage.get_invoice(invoice_id)
    if not invoice:
        raise NotFoundError("Invoice", invoice_id)
    return invoice


@router.get("/{invoice_id}/file")
async def get_invoice_file(invoice_id: int, storage: InventoryStorage = Depends(get_storage)):
    invoice = await storage.get_invoice(invoice_id)
    if not invoice:
        raise NotFoundError("Invoice", invoice_id)
    if not invoice.file_path or not os.path.exists(invoice.file_path):
        raise NotFoundError("File")
    return FileResponse(invoice.file_path, filename=invoice.file_name)
