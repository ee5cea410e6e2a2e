from loguru import logger
from inventory_tracker.core.config import Settings
from inventory_tracker.storage.base import InventoryStorage
from inventory_tracker.storage.database import DatabaseStorage
from inventory_tracker.storage.memory import MemoryStorage


def build_storage(settings: Settings) -> InventoryStorage:
    if settings.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory storage; data is lost on restart")
        return MemoryStorage()
    if settings.STORAGE_BACKEND == "database":
        logger.info("Using database storage")
        return DatabaseStorage(settings.DATABASE_URL, echo=settings.LOG_LEVEL.upper() == "DEBUG")
    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")


__all__ = ["InventoryStorage", "DatabaseStorage", "MemoryStorage", "build_storage"]
