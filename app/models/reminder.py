import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from app.db import Base


def utc_now():
    return datetime.now(timezone.utc)


def new_reminder_id():
    return str(uuid.uuid4())


class ReminderStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Reminder(Base):
    __tablename__ = "reminders"
    __table_args__ = (
        Index("ix_reminders_status_trigger", "status", "egress_trigger_utc"),
    )

    id = Column(String(36), primary_key=True, default=new_reminder_id)
    user_email = Column(String(320), nullable=False, index=True)
    service_name = Column(String(100), nullable=False)
    trial_end_utc = Column(DateTime(timezone=True), nullable=False)
    egress_trigger_utc = Column(DateTime(timezone=True), nullable=False)
    timezone_offset = Column(Integer, nullable=False, default=0)  # minutes ahead of UTC
    magic_hash = Column(String(64), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default=ReminderStatus.PENDING)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
