import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import get_store
from app.services import pages
from app.services.cancellation import CancellationStatus, cancel_by_token
from app.services.store import ReminderNotFoundError, ReminderStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cancel", tags=["cancel"])


@router.get("/{magic_hash}", response_class=HTMLResponse)
async def cancel_reminder(
    magic_hash: str,
    action: Optional[str] = Query(default=None, description="cancel (default) or delete"),
    store: ReminderStore = Depends(get_store),
):
    """One-click cancellation. Delete maps to the same cancelled state."""
    try:
        outcome = cancel_by_token(store, magic_hash)
    except (SQLAlchemyError, ReminderNotFoundError) as e:
        logger.error(f"Error cancelling reminder: {e}")
        return HTMLResponse(
            pages.error_page("Failed to cancel reminder. Please try again later."),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if outcome.status == CancellationStatus.NOT_FOUND:
        return HTMLResponse(pages.not_found_page())

    if outcome.status == CancellationStatus.ALREADY_CANCELLED:
        return HTMLResponse(pages.already_cancelled_page())

    return HTMLResponse(
        pages.cancelled_page(outcome.reminder.service_name, deleted=action == "delete")
    )
