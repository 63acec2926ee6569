"""
Resend email service for new application notifications.

Every submitted application produces one email to the recruiting inbox so a
recruiter can review it and follow up from the dashboard.
"""

import html
import logging
from typing import Any, Dict, Optional
import resend
from resend.exceptions import ResendError

from recruiting.core.config import Settings
from recruiting.services.video_upload import format_file_size

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends notification emails through Resend.

    Sender and recipient are fixed per deployment; candidates never receive
    mail from this service.
    """

    def __init__(self, api_key: str, from_address: str, recipient: str):
        self.api_key = api_key
        self.from_address = from_address
        self.recipient = recipient

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            api_key=settings.RESEND_API_KEY,
            from_address=settings.NOTIFICATION_FROM,
            recipient=settings.NOTIFICATION_RECIPIENT,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def send_new_application_notification(self, application: Dict[str, Any]) -> bool:
        """
        Email the recruiting inbox about a new application.

        Args:
            application: JSON-safe summary with name, email, phone, message and
                optional video_url / video_size

        Returns:
            bool: True if Resend accepted the email, False otherwise
        """
        if not self.enabled:
            logger.warning("RESEND_API_KEY not configured, skipping application notification")
            return False

        params = {
            "from": self.from_address,
            "to": [self.recipient],
            "subject": f"New Application from {application['name']}",
            "html": self._build_notification_html(application),
        }

        try:
            resend.api_key = self.api_key
            response = resend.Emails.send(params)
        except ResendError as e:
            logger.error(f"Resend rejected notification for application {application.get('id')}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending notification for application {application.get('id')}: {e}")
            return False

        message_id = response.get("id") if isinstance(response, dict) else None
        logger.info(f"Application notification sent for {application.get('id')} (MessageId: {message_id})")
        return True

    def _build_notification_html(self, application: Dict[str, Any]) -> str:
        message = html.escape(application.get("message") or "").replace("\n", "<br>")

        video_section = ""
        video_url: Optional[str] = application.get("video_url")
        if video_url:
            size = application.get("video_size")
            size_text = f" ({format_file_size(size)})" if size else ""
            video_section = (
                f'<p><strong>Video Application:</strong> '
                f'<a href="{html.escape(video_url, quote=True)}">View Video</a>{size_text}</p>'
            )

        return f"""
<h2>New Sales Internship Application</h2>
<p><strong>Name:</strong> {html.escape(application['name'])}</p>
<p><strong>Email:</strong> {html.escape(application['email'])}</p>
<p><strong>Phone:</strong> {html.escape(application['phone'])}</p>
<p><strong>Message:</strong></p>
<p>{message}</p>
{video_section}
<hr>
<p>Log in to your dashboard to review this application and send them a Calendly link.</p>
"""
