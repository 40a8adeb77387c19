from celery import Celery
from celery.schedules import crontab

from current_state.core.config import get_settings
from current_state.core.logging import setup_logging

settings = get_settings()
setup_logging()

celery_app = Celery(
    "current_state",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    worker_hijack_root_logger=False,
    beat_schedule={
        "rollup-yesterday": {
            "task": "summaries.rollup_all",
            "schedule": crontab(hour=3, minute=0),
        },
    },
)

celery_app.autodiscover_tasks([
    "current_state.workers.summaries",
])
