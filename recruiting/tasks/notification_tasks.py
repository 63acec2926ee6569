"""
Celery tasks for new application notifications.

Delivery runs after the application row is committed and has its own retry
policy; the submission request never waits for it.
"""

import logging
from typing import Any, Dict
from celery import shared_task

from recruiting.core.celery_app import celery_app  # noqa: F401 - binds shared tasks to our app
from recruiting.core.config import settings
from recruiting.services.email_service import EmailService

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """Raised inside the task so Celery schedules a retry."""


@shared_task(
    bind=True,
    name="send_application_notification_task",
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(NotificationDeliveryError,),
    retry_backoff=True,
    retry_backoff_max=600,  # Max 10 minutes between retries
    retry_jitter=True
)
def send_application_notification_task(self, payload: Dict[str, Any]):
    """
    Send the "new application" email for one application.

    Args:
        payload: JSON-safe application summary built by NotificationDispatcher

    Raises:
        NotificationDeliveryError: If Resend does not accept the email (retried)
    """
    email_service = EmailService.from_settings(settings)

    if not email_service.enabled:
        logger.warning(f"Notifications disabled, dropping notification for application {payload.get('id')}")
        return {"status": "skipped", "application_id": payload.get("id")}

    logger.info(f"Sending notification for application {payload.get('id')} (attempt {self.request.retries + 1})")

    if not email_service.send_new_application_notification(payload):
        if self.request.retries >= self.max_retries:
            logger.error(f"All retry attempts exhausted for application {payload.get('id')}")
        raise NotificationDeliveryError(f"Failed to send notification for application {payload.get('id')}")

    return {"status": "success", "application_id": payload.get("id")}
