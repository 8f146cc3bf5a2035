"""
Opt-in periodic sweep of recurring tasks.

Recurring tasks are normally caught up when a user lists today's tasks. With
``RECURRENCE_SWEEP_ENABLED=true`` the same refresh also runs for every user
with recurring tasks on a fixed interval, so instances exist before anyone
asks for them.
"""
import asyncio
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.db import get_db_session
from app.models import TodoTask
from app.todo_service import refresh_recurring_tasks
from app.logger import get_logger

logger = get_logger(__name__)

SWEEP_JOB_ID = "recurrence_sweep_job"

_scheduler: Optional[AsyncIOScheduler] = None


def run_recurrence_sweep(now: Optional[datetime] = None) -> int:
    """
    Refresh recurring tasks for every user that has any.

    Args:
        now: Reference moment (defaults to the current time)

    Returns:
        Number of task instances created across all users
    """
    now = now or datetime.now()
    with get_db_session() as db:
        user_ids = [
            user_id for (user_id,) in
            db.query(TodoTask.user_id).filter(TodoTask.recurring.is_(True)).distinct()
        ]
        created = sum(len(refresh_recurring_tasks(db, user_id, now)) for user_id in user_ids)

    logger.info(f"Recurrence sweep: {created} new instance(s) for {len(user_ids)} user(s)")
    return created


async def _sweep_job() -> None:
    # The sweep does blocking database work
    await asyncio.get_running_loop().run_in_executor(None, run_recurrence_sweep)


def start_scheduler() -> AsyncIOScheduler:
    """Start the sweep job; calling it again returns the running scheduler."""
    global _scheduler

    if _scheduler is None:
        interval = settings.recurrence_sweep_interval_minutes
        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            _sweep_job,
            trigger=IntervalTrigger(minutes=interval),
            id=SWEEP_JOB_ID,
            name="Recurring task sweep",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        _scheduler = scheduler
        logger.info(f"Recurrence sweep scheduled every {interval} minute(s)")
    return _scheduler


def stop_scheduler() -> None:
    global _scheduler

    if _scheduler is not None:
        _scheduler.shutdown(wait=True)
        _scheduler = None
        logger.info("Recurrence sweep stopped")


def get_scheduler_status() -> dict:
    """Whether the sweep is running, and when it fires next."""
    job = _scheduler.get_job(SWEEP_JOB_ID) if _scheduler is not None else None
    next_run = job.next_run_time if job is not None else None
    return {
        "running": bool(_scheduler and _scheduler.running),
        "next_run": next_run.isoformat() if next_run else None,
        "interval_minutes": settings.recurrence_sweep_interval_minutes,
    }
