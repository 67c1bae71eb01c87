"""
ARQ background worker.

Runs the past-due visit sweep every night at the configured local time
(22:00 by default). A worker that starts after that time runs the sweep
immediately, so a missed night is caught up on the next start.

Start with: arq fieldops.worker.WorkerSettings
"""

import asyncio
import logging
from dataclasses import asdict

from arq.connections import RedisSettings
from arq.cron import cron

from .config import settings
from .db.store import get_store
from .errors import StoreError
from .services.reconciliation import reconcile_past_due_visits, should_catch_up_at_startup
from .timeutils import now_local

logger = logging.getLogger(__name__)


def get_redis_settings() -> RedisSettings:
    """Get Redis settings for ARQ worker"""
    if settings.redis_url:
        return RedisSettings.from_dsn(settings.redis_url)
    return RedisSettings()


async def reconcile_past_due_task(ctx):
    """Nightly sweep: move overdue pending visits to their next feasible slot."""
    logger.info("Starting past due visit sweep")
    result = await asyncio.to_thread(reconcile_past_due_visits, get_store())
    if result.success:
        logger.info(f"Past due sweep complete: {result.updated}/{result.found} updated")
    else:
        logger.error(f"❌ Past due sweep failed: {result.message}")
    return asdict(result)


async def startup(ctx):
    logging.basicConfig(level=settings.log_level.upper())
    if not should_catch_up_at_startup(now_local(), settings.reconcile_hour, settings.reconcile_minute):
        return
    logger.info("Worker started after the nightly sweep time, running catch-up now")
    try:
        await reconcile_past_due_task(ctx)
    except StoreError as e:
        # the cron run will try again
        logger.error(f"❌ Startup catch-up failed: {e}")


class WorkerSettings:
    """ARQ Worker Settings"""

    functions = [reconcile_past_due_task]
    redis_settings = get_redis_settings()
    on_startup = startup
    timezone = settings.tz

    # No automatic retries: a failed sweep is reported and the next run repairs it
    max_tries = 1

    cron_jobs = [
        cron(reconcile_past_due_task, hour=settings.reconcile_hour, minute=settings.reconcile_minute),
    ]
