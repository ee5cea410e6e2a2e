from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger
from inventory_tracker.core.config import Settings
from inventory_tracker.services.notifications import NotificationScanner

NOTIFICATION_SCAN_JOB_ID = "notification_scan"


def start_notification_scheduler(scanner: NotificationScanner, settings: Settings) -> AsyncIOScheduler | None:
    if not settings.NOTIFICATION_SCAN_ENABLED:
        logger.info("Notification scan disabled")
        return None

    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        scanner.run_all_checks,
        trigger=IntervalTrigger(minutes=settings.NOTIFICATION_SCAN_INTERVAL_MINUTES),
        id=NOTIFICATION_SCAN_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(f"Notification scan scheduled every {settings.NOTIFICATION_SCAN_INTERVAL_MINUTES} minutes")
    return scheduler


def stop_notification_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)
