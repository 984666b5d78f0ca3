import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import get_notifier, get_store
from app.schemas.reminder import ArmReminderResponse, ReminderCreate, ReminderTicket, TimeRemaining
from app.services.email import EmailService
from app.services.reminders import arm_reminder, send_confirmation_in_background
from app.services.store import ConflictError, ReminderStore
from app.services.timing import calculate_time_remaining

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("", response_model=ArmReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    reminder_data: ReminderCreate,
    background_tasks: BackgroundTasks,
    store: ReminderStore = Depends(get_store),
    notifier: EmailService = Depends(get_notifier),
):
    """Arm a reminder that fires ahead of a trial deadline."""
    try:
        reminder = arm_reminder(store, reminder_data)
    except (ConflictError, SQLAlchemyError) as e:
        logger.error(f"Error creating reminder: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create reminder",
        )

    # Runs after the response has been sent
    background_tasks.add_task(send_confirmation_in_background, notifier, reminder)

    return ArmReminderResponse(
        reminder=ReminderTicket(
            id=reminder.id,
            service_name=reminder.service_name,
            deadline=reminder.trial_end_utc,
            trigger_time=reminder.egress_trigger_utc,
            time_remaining=TimeRemaining(**calculate_time_remaining(reminder.egress_trigger_utc)),
        )
    )
