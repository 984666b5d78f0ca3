from app.schemas.reminder import (
    ArmReminderResponse,
    DebugReminder,
    DebugReminderListResponse,
    DispatchResponse,
    DispatchResult,
    ReminderCreate,
    ReminderRecord,
    ReminderTicket,
    TimeRemaining,
)

__all__ = [
    "ArmReminderResponse",
    "DebugReminder",
    "DebugReminderListResponse",
    "DispatchResponse",
    "DispatchResult",
    "ReminderCreate",
    "ReminderRecord",
    "ReminderTicket",
    "TimeRemaining",
]
