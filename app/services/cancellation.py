import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.models.reminder import ReminderStatus
from app.schemas.reminder import ReminderRecord
from app.services.store import ReminderStore

logger = logging.getLogger(__name__)


class CancellationStatus(str, Enum):
    CANCELLED = "cancelled"
    ALREADY_CANCELLED = "already_cancelled"
    NOT_FOUND = "not_found"


class CancellationOutcome(BaseModel):
    status: CancellationStatus
    reminder: Optional[ReminderRecord] = None


def cancel_by_token(store: ReminderStore, magic_hash: str) -> CancellationOutcome:
    """
    Cancel the reminder identified by its magic hash.

    Possession of the token is the whole credential. Repeating the call is
    harmless: the second time it reports ALREADY_CANCELLED.
    """
    reminder = store.find_by_token(magic_hash)
    if reminder is None:
        return CancellationOutcome(status=CancellationStatus.NOT_FOUND)

    if reminder.status == ReminderStatus.CANCELLED:
        return CancellationOutcome(status=CancellationStatus.ALREADY_CANCELLED, reminder=reminder)

    cancelled = store.cancel(reminder.id)
    logger.info(f"Reminder {reminder.id} cancelled (was {reminder.status})")
    return CancellationOutcome(status=CancellationStatus.CANCELLED, reminder=cancelled)
