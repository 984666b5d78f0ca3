import logging
from datetime import datetime
from typing import Optional

from app.config import settings
from app.schemas.reminder import ReminderCreate, ReminderRecord
from app.services.email import EmailService, NotificationIntent
from app.services.store import ConflictError, ReminderStore
from app.services.timing import calculate_egress_trigger, local_to_utc, normalize_to_safe_time
from app.services.tokens import generate_magic_hash

logger = logging.getLogger(__name__)


def arm_reminder(
    store: ReminderStore,
    data: ReminderCreate,
    now: Optional[datetime] = None,
) -> ReminderRecord:
    """
    Compute the deadline and trigger instants and persist a pending reminder.

    A magic hash collision is retried with a fresh token; ConflictError
    escapes only once every attempt has collided.
    """
    local_deadline = normalize_to_safe_time(data.date, data.safe_mode)
    trial_end_utc = local_to_utc(local_deadline, data.timezone_offset)
    egress_trigger_utc = calculate_egress_trigger(trial_end_utc, data.timezone_offset, now=now)

    for attempt in range(1, settings.magic_hash_attempts + 1):
        try:
            reminder = store.create(
                user_email=data.email,
                service_name=data.service_name,
                trial_end_utc=trial_end_utc,
                egress_trigger_utc=egress_trigger_utc,
                timezone_offset=data.timezone_offset,
                magic_hash=generate_magic_hash(),
            )
        except ConflictError:
            logger.warning(f"Magic hash collision on attempt {attempt}")
            continue

        logger.info(
            f"Armed reminder {reminder.id} for {reminder.service_name}, "
            f"trigger at {reminder.egress_trigger_utc.isoformat()}"
        )
        return reminder

    raise ConflictError(f"Could not allocate a unique magic hash after {settings.magic_hash_attempts} attempts")


def send_confirmation_in_background(notifier: EmailService, reminder: ReminderRecord):
    """Deliver the confirmation email. Failures are logged and go no further."""
    try:
        success, _, error_message = notifier.send(reminder, NotificationIntent.CONFIRMATION)
    except Exception as e:
        success, error_message = False, str(e)

    if not success:
        logger.error(f"Failed to send confirmation email for reminder {reminder.id}: {error_message}")
