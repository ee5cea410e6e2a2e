from datetime import datetime, date
from typing import Optional
from inventory_tracker.schemas.base import CamelModel


class InvoiceCreate(CamelModel):
    invoice_number: str
    vendor_name: str
    purchase_date: date
    file_name: Optional[str] = None
    file_path: Optional[str] = None


class InvoiceResponse(CamelModel):
    id: int
    invoice_number: str
    vendor_name: str
    purchase_date: date
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    created_at: datetime
