"""
Background housekeeping for the relay.

The only recurring task is dropping expired rate-limit windows so the
in-memory limiter does not grow with every client IP ever seen.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor
import logging

from formrelay.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

RATE_LIMIT_PURGE_JOB_ID = "rate_limit_purge_job"

job_defaults = {
    'coalesce': True,      # Skip missed runs instead of executing all
    'max_instances': 1
}


def purge_rate_limits(limiter: RateLimiter) -> int:
    dropped = limiter.purge_expired()
    if dropped:
        logger.debug(f"🧹 Purged {dropped} expired rate limit windows, {len(limiter)} still tracked")
    return dropped


def start_purge_scheduler(limiter: RateLimiter, interval_minutes: int) -> AsyncIOScheduler:
    """
    Start a scheduler that purges the limiter on a fixed interval.

    Must be called from a running event loop (the app lifespan).

    Args:
        limiter (RateLimiter): The app's submission rate limiter
        interval_minutes (int): Minutes between purges

    Returns:
        AsyncIOScheduler: The running scheduler, for stop_scheduler on shutdown
    """
    scheduler = AsyncIOScheduler(
        jobstores={'default': MemoryJobStore()},
        executors={'default': AsyncIOExecutor()},
        job_defaults=job_defaults,
        timezone='UTC'
    )
    scheduler.add_job(
        purge_rate_limits,
        trigger="interval",
        minutes=interval_minutes,
        args=[limiter],
        id=RATE_LIMIT_PURGE_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"⏱️ Rate limit purge scheduled every {interval_minutes} minutes")
    return scheduler


def stop_scheduler(scheduler: AsyncIOScheduler):
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
