"""Background scheduler evicting old tasks from the in-memory store."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from taskapi.config import settings
from taskapi.services.challenge_service import ChallengeService

logger = logging.getLogger(__name__)


def cleanup_job(service: ChallengeService) -> None:
    """Evict tasks older than the configured retention."""
    try:
        evicted = service.evict_expired(settings.task_retention_seconds)
        if evicted:
            logger.info(f"Cleanup: evicted {evicted} tasks")
    except Exception as e:
        logger.error(f"Cleanup failed: {e}")


def start_scheduler(service: ChallengeService) -> BackgroundScheduler:
    """Start a background scheduler running the eviction job."""
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        cleanup_job,
        trigger=IntervalTrigger(seconds=settings.cleanup_interval_seconds),
        args=[service],
        id="evict_expired_tasks",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started - eviction runs every {settings.cleanup_interval_seconds} second(s)"
    )
    return scheduler


def shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    """Shutdown the scheduler gracefully."""
    scheduler.shutdown()
    logger.info("Scheduler stopped")
