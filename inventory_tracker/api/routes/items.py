from fastapi import APIRouter, Depends
from inventory_tracker.api.deps import get_storage
from inventory_tracker.core.errors import NotFoundError
from inventory_tracker.schemas.item import ItemBatchCreate, ItemCreate, ItemResponse
from inventory_tracker.services import inventory
from inventory_tracker.storage import InventoryStorage

router = APIRouter(prefix="/api/items", tags=["items"])


@router.post("", response_model=list[ItemResponse], status_code=201)
async def create_items(
    body: ItemBatchCreate | ItemCreate,
    storage: InventoryStorage = Depends(get_storage),
):
    payloads = body.items if isinstance(body, ItemBatchCreate) else [body]
    return await inventory.create_items(storage, payloads)


@router.get("", response_model=list[ItemResponse])
async def list_items(storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_items()


@router.get("/low-stock", response_model=list[ItemResponse])
async def list_low_stock_items(storage: InventoryStorage = Depends(get_storage)):
    return await inventory.low_stock_items(storage)


@router.get("/invoice/{invoice_id}", response_model=list[ItemResponse])
async def list_items_for_invoice(invoice_id: int, storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_items_by_invoice(invoice_id)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(item_id: int, storage: InventoryStorage = Depends(get_storage)):
    item = await storage.get_item(item_id)
    if not item:
        raise NotFoundError("Item", item_id)
    return item
