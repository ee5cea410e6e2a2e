from fastapi import APIRouter, Depends
from inventory_tracker.api.deps import get_storage
from inventory_tracker.schemas.assignment import AssignmentCreate, AssignmentResponse, RecentAssignmentResponse
from inventory_tracker.services import inventory
from inventory_tracker.storage import InventoryStorage

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


@router.post("", response_model=AssignmentResponse, status_code=201)
async def create_assignment(body: AssignmentCreate, storage: InventoryStorage = Depends(get_storage)):
    return await inventory.create_assignment(storage, body)


@router.get("", response_model=list[AssignmentResponse])
async def list_assignments(storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_assignments()


@router.get("/recent", response_model=list[RecentAssignmentResponse])
async def list_recent_assignments(storage: InventoryStorage = Depends(get_storage)):
    return await inventory.recent_assignments(storage)


@router.get("/item/{item_id}", response_model=list[AssignmentResponse])
async def list_assignments_for_item(item_id: int, storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_assignments_by_item(item_id)
