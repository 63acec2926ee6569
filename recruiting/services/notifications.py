"""
Dispatch of new application notifications.

The dispatcher is the only piece the submission handler talks to. It hands
the work to Celery and reports whether that hand-off succeeded; it never
raises, because a notification problem must not fail a submission.
"""

import logging
from typing import Any, Dict

from recruiting.core.celery_utils import queue_task_safely
from recruiting.models.application import Application

logger = logging.getLogger(__name__)


def build_notification_payload(application: Application) -> Dict[str, Any]:
    """JSON-safe summary of an application for the Celery task."""
    return {
        "id": str(application.id),
        "name": application.name,
        "email": application.email,
        "phone": application.phone,
        "message": application.message,
        "video_url": application.video_url,
        "video_size": application.video_size,
    }


class NotificationDispatcher:

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def dispatch_new_application(self, payload: Dict[str, Any]) -> bool:
        """
        Queue the notification email for a freshly committed application.

        Args:
            payload: Output of build_notification_payload

        Returns:
            bool: True if the task was queued, False if notifications are
            disabled or the broker could not be reached
        """
        if not self.enabled:
            logger.warning(f"RESEND_API_KEY not configured, no notification for application {payload.get('id')}")
            return False

        # Imported here so the Celery app is only configured when needed
        from recruiting.tasks.notification_tasks import send_application_notification_task

        queued = queue_task_safely(
            send_application_notification_task,
            payload=payload,
        )
        if not queued:
            logger.error(f"Failed to queue notification for application {payload.get('id')}")
        return queued
