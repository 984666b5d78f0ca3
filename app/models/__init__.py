from app.models.reminder import Reminder, ReminderStatus

__all__ = ["Reminder", "ReminderStatus"]
