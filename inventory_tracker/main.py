from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from inventory_tracker.core.config import Settings, get_settings
from inventory_tracker.core.errors import register_exception_handlers
from inventory_tracker.core.logging import configure_logging
from inventory_tracker.api import api_router
from inventory_tracker.services.notifications import NotificationScanner
from inventory_tracker.services.scheduler import start_notification_scheduler, stop_notification_scheduler
from inventory_tracker.storage import build_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"Application startup ({settings.ENVIRONMENT}, storage={settings.STORAGE_BACKEND})")
    await app.state.storage.startup()
    app.state.scheduler = start_notification_scheduler(app.state.scanner, settings)

    yield

    stop_notification_scheduler(app.state.scheduler)
    await app.state.storage.shutdown()
    logger.info("Application shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="Inventory Tracker API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = build_storage(settings)
    app.state.scanner = NotificationScanner(app.state.storage)
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
