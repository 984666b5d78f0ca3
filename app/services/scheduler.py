import logging
from datetime import datetime
from typing import Optional

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.db import SessionLocal
from app.models.reminder import ReminderStatus
from app.schemas.reminder import DispatchResult
from app.services.email import EmailService, NotificationIntent
from app.services.store import ReminderStore
from app.services.timing import utc_now

logger = logging.getLogger(__name__)

SKIPPED = "skipped"

scheduler = BackgroundScheduler()


def process_due_reminders(
    store: ReminderStore,
    notifier: EmailService,
    now: Optional[datetime] = None,
) -> DispatchResult:
    """
    Run one dispatch pass over every pending reminder that is due.

    Store failures while fetching or locking propagate to the caller.
    Delivery failures are contained to the reminder they happened on.
    """
    now = now or utc_now()
    logger.info("Starting egress dispatch pass")

    due_reminders = store.find_due_pending(now)
    result = DispatchResult()

    if not due_reminders:
        logger.info("No pending reminders to process")
        return result

    logger.info(f"Found {len(due_reminders)} due reminders")

    for candidate in due_reminders:
        outcome = process_reminder(store, notifier, candidate.id)
        if outcome == SKIPPED:
            result.skipped += 1
            continue

        result.processed += 1
        if outcome == ReminderStatus.SENT:
            result.sent += 1
        else:
            result.failed += 1

    logger.info(
        f"Dispatch pass completed: processed={result.processed} sent={result.sent} "
        f"failed={result.failed} skipped={result.skipped}"
    )
    return result


def process_reminder(store: ReminderStore, notifier: EmailService, reminder_id: str) -> str:
    """Lock, notify and finalize a single reminder. Returns the outcome."""
    locked = store.try_lock(reminder_id)
    if locked is None:
        logger.info(f"Reminder {reminder_id} already claimed, skipping")
        return SKIPPED

    try:
        success, email_id, error_message = notifier.send(locked, NotificationIntent.TRIGGER_ALERT)
    except Exception as e:
        success, email_id, error_message = False, None, str(e)

    if success:
        status = ReminderStatus.SENT
        logger.info(f"Trigger alert sent for reminder {reminder_id} ({locked.service_name}), id: {email_id}")
    else:
        status = ReminderStatus.FAILED
        logger.error(f"Failed to deliver reminder {reminder_id}: {error_message}")

    try:
        store.set_status(reminder_id, status)
    except Exception as e:
        # The row stays in processing; it is never picked up again
        logger.error(f"Failed to mark reminder {reminder_id} as {status}: {e}")

    return status


def run_dispatch_job(notifier: EmailService):
    """Scheduler entry point: one dispatch pass on a fresh session."""
    db = SessionLocal()
    try:
        process_due_reminders(ReminderStore(db), notifier)
    except Exception as e:
        logger.error(f"Error in dispatch job: {e}")
    finally:
        db.close()


def start_scheduler(notifier: EmailService):
    """Start the background scheduler."""
    if not settings.enable_scheduler:
        logger.info("Scheduler is disabled via configuration")
        return

    if scheduler.running:
        logger.info("Scheduler is already running")
        return

    trigger = IntervalTrigger(
        minutes=settings.dispatch_interval_minutes,
        timezone=pytz.UTC,
    )
    scheduler.add_job(
        run_dispatch_job,
        trigger=trigger,
        args=[notifier],
        id="egress_dispatch",
        name="Egress Reminder Dispatch",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        f"Scheduler started. Dispatch runs every {settings.dispatch_interval_minutes} minutes"
    )


def stop_scheduler():
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
