from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal
import json


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./inventory.db"
    STORAGE_BACKEND: Literal["database", "memory"] = "database"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_UPLOAD_EXTENSIONS: str = ".pdf,.jpg,.jpeg,.png"
    CORS_ORIGINS: str = '["http://localhost:5173"]'
    ENVIRONMENT: str = "development"
    NOTIFICATION_SCAN_ENABLED: bool = True
    NOTIFICATION_SCAN_INTERVAL_MINUTES: int = 60
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    @property
    def cors_origins_list(self) -> list[str]:
        return json.loads(self.CORS_ORIGINS)

    @property
    def allowed_upload_extensions(self) -> set[str]:
        return {ext.strip().lower() for ext in self.ALLOWED_UPLOAD_EXTENSIONS.split(",") if ext.strip()}

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
