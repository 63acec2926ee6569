"""
Celery application configuration.

Redis is both the message broker and result backend. The only queued work is
the new-application notification email, which runs outside the request that
created the application. It is routed to its own queue:

    celery -A recruiting.core.celery_app worker -Q notifications
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging
from recruiting.core.config import settings

celery_app = Celery(
    "recruiting_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["recruiting.tasks.notification_tasks"],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_time_limit=120,  # Email sends are short
    task_soft_time_limit=90,
    task_acks_late=True,  # Re-deliver if the worker dies mid-send

    # Routing
    task_routes={
        "send_application_notification_task": {"queue": "notifications"},
    },

    # Result backend
    result_expires=3600,

    # Worker behavior
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=200,
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Use the application's log format in the worker too."""
    from recruiting.core.logging_config import WORKER_SERVICE, setup_logging

    setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS, service=WORKER_SERVICE)
