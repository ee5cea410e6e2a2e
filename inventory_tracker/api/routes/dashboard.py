from fastapi import APIRouter, Depends
from inventory_tracker.api.deps import get_storage
from inventory_tracker.schemas.dashboard import DashboardMetrics
from inventory_tracker.services import inventory
from inventory_tracker.storage import InventoryStorage

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(storage: InventoryStorage = Depends(get_storage)):
    return await inventory.dashboard_metrics(storage)
