"""
Celery application configuration for FreshRoute Dispatch.

Daily batch planning runs as a Celery task so the API never blocks on a
full planning pass. Celery beat queues the next day's batch every evening.

Usage:
    # Start worker (from project root):
    celery -A freshroute.core.celery_app worker --loglevel=info

    # Start the scheduler:
    celery -A freshroute.core.celery_app beat --loglevel=info
"""
from celery import Celery
from celery.schedules import crontab

from freshroute.core.config import settings

# Create Celery application
celery_app = Celery(
    "freshroute",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["freshroute.services.tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.timezone,
    enable_utc=True,

    # Task execution
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_track_started=True,

    # Result backend
    result_expires=86400,  # Results expire after 24 hours

    # Worker settings
    worker_prefetch_multiplier=1,  # One planning pass at a time per process

    # Task routing
    task_routes={
        "freshroute.services.tasks.run_daily_batch": {"queue": "planning"},
        "freshroute.services.tasks.*": {"queue": "default"},
    },

    # Task time limits
    task_soft_time_limit=settings.planning_task_soft_time_limit,
    task_time_limit=settings.planning_task_time_limit,
)

# Define task queues
celery_app.conf.task_queues = {
    "default": {
        "exchange": "default",
        "routing_key": "default",
    },
    "planning": {
        "exchange": "planning",
        "routing_key": "planning",
    },
}

celery_app.conf.beat_schedule = {
    "plan-next-day-batch": {
        "task": "freshroute.services.tasks.plan_next_day_batch",
        "schedule": crontab(
            hour=settings.daily_batch_hour,
            minute=settings.daily_batch_minute,
        ),
    },
}
