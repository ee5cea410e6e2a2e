from fastapi import Request
from inventory_tracker.core.config import Settings
from inventory_tracker.services.notifications import NotificationScanner
from inventory_tracker.storage import InventoryStorage


def get_storage(request: Request) -> InventoryStorage:
    return request.app.state.storage


def get_scanner(request: Request) -> NotificationScanner:
    return request.app.state.scanner


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
