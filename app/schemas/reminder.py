from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.services.timing import as_utc


class CamelModel(BaseModel):
    """Wire models use camelCase keys; snake_case is accepted on input too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TimeRemaining(CamelModel):
    days: int = 0
    hours: int = 0
    minutes: int = 0
    total_hours: int = 0


class ReminderCreate(CamelModel):
    service_name: str = Field(..., min_length=1, max_length=100)
    date: datetime
    email: EmailStr
    timezone_offset: int = Field(default=0, ge=-720, le=840)
    safe_mode: bool = True

    @field_validator("service_name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("date", mode="before")
    @classmethod
    def parse_local_date(cls, v):
        """Read the deadline as a wall-clock value, ignoring any offset suffix."""
        if isinstance(v, datetime):
            return v.replace(tzinfo=None)
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Date is required")
        try:
            parsed = datetime.fromisoformat(v.strip())
        except ValueError:
            raise ValueError("Invalid date format")
        return parsed.replace(tzinfo=None)


class ReminderRecord(BaseModel):
    """Detached snapshot of a stored reminder."""

    id: str
    user_email: str
    service_name: str
    trial_end_utc: datetime
    egress_trigger_utc: datetime
    timezone_offset: int
    magic_hash: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("trial_end_utc", "egress_trigger_utc", "created_at", "updated_at")
    @classmethod
    def attach_utc(cls, v: datetime | None) -> datetime | None:
        # SQLite hands back naive values
        return as_utc(v) if v is not None else None


class ReminderTicket(CamelModel):
    id: str
    service_name: str
    deadline: datetime
    trigger_time: datetime
    time_remaining: TimeRemaining


class ArmReminderResponse(CamelModel):
    success: bool = True
    reminder: ReminderTicket


class DispatchResult(BaseModel):
    processed: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0


class DispatchResponse(DispatchResult):
    success: bool = True
    message: str


class DebugReminder(CamelModel):
    id: str
    service: str
    email: str
    status: str
    trigger_time: datetime
    is_ready: bool
    time_until_trigger_minutes: int
    created: Optional[datetime] = None


class DebugReminderListResponse(CamelModel):
    current_time: datetime
    reminders: list[DebugReminder]
