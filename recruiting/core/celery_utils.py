"""
Hand-off of Celery tasks from request handlers.

Publishing never raises into the caller: a broker outage or a slow broker is
logged and reported as False, so a submission that is already committed is
never turned into an error by its follow-up work.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from celery import Task
from kombu import Connection

from recruiting.core.config import settings

logger = logging.getLogger(__name__)

# Publishing runs off the event loop; Celery's pooled connections do not mix
# well with uvicorn's loop
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="task_publish")

PUBLISH_TIMEOUT_SECONDS = 5

BROKER_RETRY_POLICY = {
    "max_retries": 3,
    "interval_start": 0,
    "interval_step": 0.2,
    "interval_max": 0.2,
}


def _publish(task: Task, kwargs: dict, broker_url: str) -> str:
    """Publish one task message over a fresh broker connection and return its id."""
    with Connection(broker_url) as conn:
        result = task.apply_async(
            kwargs=kwargs,
            connection=conn,
            retry=True,
            retry_policy=BROKER_RETRY_POLICY,
        )
    return result.id


def queue_task_safely(task: Task, **kwargs) -> bool:
    """
    Queue a Celery task, reporting failure instead of raising.

    Args:
        task: The Celery task to queue
        **kwargs: Keyword arguments for the task (JSON-serializable)

    Returns:
        bool: True if the broker accepted the message

    Example:
        queued = queue_task_safely(send_application_notification_task, payload=payload)
    """
    future = _executor.submit(_publish, task, kwargs, settings.REDIS_URL)
    try:
        task_id = future.result(timeout=PUBLISH_TIMEOUT_SECONDS)
    except FutureTimeoutError:
        logger.error(f"Timed out after {PUBLISH_TIMEOUT_SECONDS}s queueing {task.name}")
        return False
    except Exception as e:
        logger.error(f"Failed to queue task {task.name}: {e}")
        return False

    logger.info(f"Task {task.name} queued: {task_id}")
    return True
