from inventory_tracker.schemas.base import CamelModel


class DashboardMetrics(CamelModel):
    total_items: int
    available_items: int
    assigned_items: int
    low_stock_items: int
