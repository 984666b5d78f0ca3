import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.db import init_db
from app.routers import cancel, cron, redirect, reminders
from app.services.email import EmailService
from app.services.scheduler import start_scheduler, stop_scheduler

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Egress API")
    init_db()
    app.state.notifier = EmailService(settings)
    start_scheduler(app.state.notifier)
    yield
    stop_scheduler()
    logger.info("Egress API stopped")


app = FastAPI(title="Egress API", lifespan=lifespan)

app.include_router(reminders.router)
app.include_router(cancel.router)
app.include_router(redirect.router)
app.include_router(cron.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
