import html
import logging
from enum import Enum
from typing import Optional

import resend

from app.config import Settings, settings as default_settings
from app.schemas.reminder import ReminderRecord
from app.services.cancellation_links import CancellationLinkResolver, default_resolver
from app.services.timing import format_date_for_timezone

logger = logging.getLogger(__name__)

FOOTER = "Egress - Privacy-First Anti-Subscription Tool"


class NotificationIntent(str, Enum):
    CONFIRMATION = "confirmation"
    TRIGGER_ALERT = "trigger-alert"


class EmailService:
    """Email notifier using the Resend API."""

    def __init__(
        self,
        config: Settings | None = None,
        resolver: CancellationLinkResolver | None = None,
    ):
        self.config = config or default_settings
        self.resolver = resolver or default_resolver
        self._client = None
        if self.config.resend_api_key:
            resend.api_key = self.config.resend_api_key
            self._client = resend
            logger.info("Resend email service initialized")
        else:
            logger.warning("RESEND_API_KEY not configured, emails will be logged only")

    def send(
        self, reminder: ReminderRecord, intent: NotificationIntent
    ) -> tuple[bool, Optional[str], Optional[str]]:
        """
        Send the email for the given intent.

        Returns:
            tuple: (success, email_id, error_message)
        """
        if intent == NotificationIntent.CONFIRMATION:
            return self.send_confirmation(reminder)
        if intent == NotificationIntent.TRIGGER_ALERT:
            return self.send_trigger_alert(reminder)
        raise ValueError(f"Unknown notification intent: {intent}")

    def send_confirmation(
        self, reminder: ReminderRecord
    ) -> tuple[bool, Optional[str], Optional[str]]:
        """Sent right after a reminder is armed, with the one-click cancel link."""
        deadline = format_date_for_timezone(reminder.trial_end_utc, reminder.timezone_offset)
        trigger = format_date_for_timezone(reminder.egress_trigger_utc, reminder.timezone_offset)
        cancel_url = f"{self.config.app_url.rstrip('/')}/cancel/{reminder.magic_hash}"
        service = html.escape(reminder.service_name)

        subject = f"Egress Protocol Armed: {reminder.service_name}"

        html_body = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #333;">EGRESS PROTOCOL: ARMED</h2>
            <p>Your reminder has been set successfully.</p>
            <div style="background-color: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <p style="margin: 5px 0;"><strong>Target:</strong> {service}</p>
                <p style="margin: 5px 0;"><strong>Deadline:</strong> {deadline}</p>
                <p style="margin: 5px 0;"><strong>Reminder set for:</strong> {trigger}</p>
            </div>
            <p>You will receive an alert {self.config.trigger_lead_hours} hours before your trial ends.</p>
            <p><a href="{cancel_url}">Cancel this reminder</a></p>
            <p style="color: #666; font-size: 12px; margin-top: 30px;">{FOOTER}</p>
        </body>
        </html>
        """

        text_body = (
            "EGRESS PROTOCOL - ARMED\n\n"
            "Your reminder has been set successfully.\n\n"
            f"TARGET: {reminder.service_name}\n"
            f"DEADLINE: {deadline}\n"
            f"REMINDER SET FOR: {trigger}\n\n"
            f"You will receive an alert {self.config.trigger_lead_hours} hours before your trial ends.\n\n"
            f"Need to cancel this reminder? {cancel_url}\n\n"
            f"---\n{FOOTER}"
        )

        return self._deliver(reminder.user_email, subject, html_body, text_body)

    def send_trigger_alert(
        self, reminder: ReminderRecord
    ) -> tuple[bool, Optional[str], Optional[str]]:
        """Sent by the dispatcher once the trigger time has passed."""
        deadline = format_date_for_timezone(reminder.trial_end_utc, reminder.timezone_offset)
        redirect_url = self.resolver.redirect_url(reminder.service_name, self.config.app_url)
        service_cancel_url = html.escape(redirect_url)
        service = html.escape(reminder.service_name)

        subject = (
            f"ACT NOW: Cancel {reminder.service_name} within "
            f"{self.config.trigger_lead_hours} hours"
        )

        html_body = f"""
        <html>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #333;">EGRESS PROTOCOL: ACTIVE ALERT</h2>
            <div style="background-color: #fff3cd; padding: 20px; border-radius: 8px; margin: 20px 0;">
                <h3 style="margin: 0 0 10px 0; color: #856404;">Time to Cancel</h3>
                <p style="margin: 0;">Your trial for <strong>{service}</strong> ends on <strong>{deadline}</strong>.</p>
            </div>
            <p>If you do nothing, you will be charged automatically.</p>
            <p style="text-align: center; margin: 30px 0;">
                <a href="{service_cancel_url}" style="background-color: #000; color: #fff; padding: 16px 32px; text-decoration: none; border-radius: 6px;">CANCEL NOW</a>
            </p>
            <p style="color: #666; font-size: 12px; margin-top: 30px;">{FOOTER}</p>
        </body>
        </html>
        """

        text_body = (
            "EGRESS PROTOCOL - ACTIVE ALERT\n\n"
            f"Your trial for {reminder.service_name} ends on {deadline}.\n\n"
            "If you do nothing, you will be charged automatically.\n\n"
            f"Cancel now: {redirect_url}\n\n"
            f"---\n{FOOTER}"
        )

        return self._deliver(reminder.user_email, subject, html_body, text_body)

    def _deliver(
        self, to_email: str, subject: str, html_body: str, text_body: str
    ) -> tuple[bool, Optional[str], Optional[str]]:
        if not self._client:
            logger.info(f"[DRY RUN] Would send email to {to_email}: {subject}")
            return True, "dry-run-id", None

        try:
            params = {
                "from": self.config.email_from_address,
                "to": [to_email],
                "subject": subject,
                "html": html_body,
                "text": text_body,
            }
            response = self._client.Emails.send(params)
            email_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
            logger.info(f"Email sent to {to_email}, id: {email_id}")
            return True, email_id, None
        except Exception as e:
            error_msg = str(e)
            logger.error(f"Failed to send email to {to_email}: {error_msg}")
            return False, None, error_msg
