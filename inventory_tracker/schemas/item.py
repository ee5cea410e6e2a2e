from datetime import datetime
from pydantic import Field
from inventory_tracker.schemas.base import CamelModel


class ItemCreate(CamelModel):
    # no quantity_available: it always starts at quantity_purchased
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    quantity_purchased: int = Field(ge=0)
    unit_price: float = Field(ge=0)
    invoice_id: int


class ItemBatchCreate(CamelModel):
    items: list[ItemCreate] = Field(min_length=1)


class ItemResponse(CamelModel):
    id: int
    name: str
    category: str
    quantity_purchased: int
    quantity_available: int
    unit_price: float
    invoice_id: int
    created_at: datetime


class ItemSummary(CamelModel):
    name: str
    category: str
