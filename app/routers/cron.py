import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import get_notifier, get_store, verify_cron_caller
from app.schemas.reminder import DebugReminder, DebugReminderListResponse, DispatchResponse
from app.services.email import EmailService
from app.services.scheduler import process_due_reminders
from app.services.store import ReminderStore
from app.services.timing import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cron"], dependencies=[Depends(verify_cron_caller)])


@router.api_route("/cron", methods=["GET", "POST"], response_model=DispatchResponse)
def run_dispatch(
    store: ReminderStore = Depends(get_store),
    notifier: EmailService = Depends(get_notifier),
):
    """Process every pending reminder whose trigger time has passed."""
    try:
        result = process_due_reminders(store, notifier)
    except SQLAlchemyError as e:
        logger.error(f"Cron job error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process reminders",
        )

    if result.processed == 0 and result.skipped == 0:
        message = "No pending reminders to process"
    else:
        message = f"Processed {result.processed} reminders"

    return DispatchResponse(message=message, **result.model_dump())


@router.get("/debug/reminders", response_model=DebugReminderListResponse)
def list_recent_reminders(
    limit: int = Query(default=10, ge=1, le=100, description="Number of reminders"),
    store: ReminderStore = Depends(get_store),
):
    """Most recently created reminders with their dispatch readiness."""
    now = utc_now()
    items = []
    for reminder in store.list_recent(limit):
        until_trigger = reminder.egress_trigger_utc - now
        items.append(
            DebugReminder(
                id=reminder.id,
                service=reminder.service_name,
                email=reminder.user_email,
                status=reminder.status,
                trigger_time=reminder.egress_trigger_utc,
                is_ready=reminder.egress_trigger_utc <= now,
                time_until_trigger_minutes=round(until_trigger.total_seconds() / 60),
                created=reminder.created_at,
            )
        )

    return DebugReminderListResponse(current_time=now, reminders=items)
