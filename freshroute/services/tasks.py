"""
Celery tasks for FreshRoute Dispatch.

Runs the daily batch planner in a worker, and queues tomorrow's batch
from Celery beat.
"""
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo
import logging

from freshroute.core.celery_app import celery_app
from freshroute.core.config import settings
from freshroute.db.database import planning_session
from freshroute.schemas.dispatch import BatchPlanResponse
from freshroute.services.dispatch.factory import build_planner

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    name="freshroute.services.tasks.run_daily_batch",
    queue="planning",
)
def run_daily_batch(self, plan_date_str: str) -> dict:
    """
    Plan every pending order for a date.

    Args:
        plan_date_str: Date string (YYYY-MM-DD)

    Returns:
        BatchPlanResponse as a JSON-ready dict
    """
    plan_date = datetime.strptime(plan_date_str, "%Y-%m-%d").date()
    logger.info(f"Starting daily batch task {self.request.id} for {plan_date}")

    try:
        with planning_session() as session:
            result = build_planner(session).plan_daily_batch(plan_date)
    except Exception as e:
        logger.error(f"Daily batch for {plan_date} failed: {e}")
        raise

    logger.info(
        f"Daily batch for {plan_date} completed: {len(result.jobs)} jobs, "
        f"{len(result.unallocated)} orders not fully placed"
    )
    return BatchPlanResponse.from_result(result).model_dump(mode="json")


@celery_app.task(name="freshroute.services.tasks.plan_next_day_batch")
def plan_next_day_batch() -> str:
    """Queue tomorrow's daily batch (Celery beat entry point)."""
    # Dates follow the beat timezone, not the worker clock
    tomorrow = datetime.now(ZoneInfo(settings.timezone)).date() + timedelta(days=1)
    task = run_daily_batch.delay(tomorrow.isoformat())
    logger.info(f"Queued daily batch for {tomorrow} as task {task.id}")
    return task.id
