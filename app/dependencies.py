import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.services.cancellation_links import CancellationLinkResolver, default_resolver
from app.services.email import EmailService
from app.services.store import ReminderStore

logger = logging.getLogger(__name__)

# auto_error=False lets trusted headers authorize a call without a bearer token
security = HTTPBearer(auto_error=False)


def get_store(db: Session = Depends(get_db)) -> ReminderStore:
    return ReminderStore(db)


def get_notifier(request: Request) -> EmailService:
    """Notifier built once in the application lifespan."""
    return request.app.state.notifier


def get_resolver() -> CancellationLinkResolver:
    return default_resolver


def _is_trusted_caller(request: Request, credentials: HTTPAuthorizationCredentials | None) -> bool:
    if settings.cron_secret and credentials is not None:
        if secrets.compare_digest(credentials.credentials, settings.cron_secret):
            return True

    if settings.trusted_cron_header and request.headers.get(settings.trusted_cron_header):
        return True

    user_agent = request.headers.get("user-agent", "")
    return any(agent in user_agent for agent in settings.trusted_cron_user_agents)


async def verify_cron_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> None:
    """Guard for the batch trigger. Enforced only in production."""
    if _is_trusted_caller(request, credentials):
        return

    if settings.environment == "production":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.warning("Cron endpoint called without proper authorization")
