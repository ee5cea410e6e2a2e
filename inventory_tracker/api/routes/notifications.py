from fastapi import APIRouter, Depends
from inventory_tracker.api.deps import get_scanner, get_storage
from inventory_tracker.core.errors import NotFoundError
from inventory_tracker.schemas.notification import MarkAllReadResponse, NotificationResponse, ScanSummary
from inventory_tracker.services.notifications import NotificationScanner
from inventory_tracker.storage import InventoryStorage

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_notifications()


@router.get("/unread", response_model=list[NotificationResponse])
async def list_unread_notifications(storage: InventoryStorage = Depends(get_storage)):
    return await storage.list_unread_notifications()


@router.post("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_read(storage: InventoryStorage = Depends(get_storage)):
    return MarkAllReadResponse(updated=await storage.mark_all_notifications_read())


@router.post("/run-checks", response_model=ScanSummary)
async def run_checks(scanner: NotificationScanner = Depends(get_scanner)):
    """Run every notification check now instead of waiting for the scheduler."""
    return await scanner.run_all_checks()


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: int, storage: InventoryStorage = Depends(get_storage)):
    notification = await storage.mark_notification_read(notification_id)
    if not notification:
        raise NotFoundError("Notification", notification_id)
    return notification
