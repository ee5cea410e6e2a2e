from fastapi import APIRouter
from inventory_tracker.api.routes import invoices, items, assignments, dashboard, notifications

api_router = APIRouter()
api_router.include_router(invoices.router)
api_router.include_router(items.router)
api_router.include_router(assignments.router)
api_router.include_router(dashboard.router)
api_router.include_router(notifications.router)
