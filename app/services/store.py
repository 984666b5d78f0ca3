from datetime import datetime
from typing import Optional

from sqlalchemy import asc, desc, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.reminder import Reminder, ReminderStatus, utc_now
from app.schemas.reminder import ReminderRecord
from app.services.timing import as_utc


class ConflictError(Exception):
    """A reminder with the same magic hash already exists."""


class ReminderNotFoundError(Exception):
    pass


class ReminderStore:
    """
    Persistence for reminders on top of a SQLAlchemy session.

    Every mutation is a single statement followed by a commit, so a failure
    never leaves a half-applied transition behind. Callers get detached
    ReminderRecord snapshots, not ORM rows.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_email: str,
        service_name: str,
        trial_end_utc: datetime,
        egress_trigger_utc: datetime,
        timezone_offset: int,
        magic_hash: str,
    ) -> ReminderRecord:
        reminder = Reminder(
            user_email=user_email.strip().lower(),
            service_name=service_name.strip(),
            trial_end_utc=as_utc(trial_end_utc),
            egress_trigger_utc=as_utc(egress_trigger_utc),
            timezone_offset=timezone_offset,
            magic_hash=magic_hash,
            status=ReminderStatus.PENDING,
        )
        self.db.add(reminder)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Only the unique token constraint is retryable
            if "magic_hash" in str(e.orig):
                raise ConflictError("Magic hash already in use") from e
            raise
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(reminder)
        return ReminderRecord.model_validate(reminder)

    def find_due_pending(self, now: datetime) -> list[ReminderRecord]:
        """Pending reminders whose trigger time has passed, earliest first."""
        reminders = (
            self.db.query(Reminder)
            .filter(
                Reminder.status == ReminderStatus.PENDING,
                Reminder.egress_trigger_utc <= as_utc(now),
            )
            .order_by(asc(Reminder.egress_trigger_utc))
            .all()
        )
        return [ReminderRecord.model_validate(r) for r in reminders]

    def try_lock(self, reminder_id: str) -> Optional[ReminderRecord]:
        """
        Move a reminder from pending to processing.

        The status check and the write are one conditional UPDATE, so among
        concurrent callers exactly one sees a matched row. Everyone else gets
        None.
        """
        rowcount = self._update(
            reminder_id,
            Reminder.status == ReminderStatus.PENDING,
            status=ReminderStatus.PROCESSING,
        )
        if rowcount != 1:
            return None
        return self._get(reminder_id)

    def set_status(self, reminder_id: str, status: str) -> ReminderRecord:
        rowcount = self._update(reminder_id, status=status)
        if rowcount == 0:
            raise ReminderNotFoundError(f"Reminder {reminder_id} not found")
        return self._get(reminder_id)

    def find_by_token(self, magic_hash: str) -> Optional[ReminderRecord]:
        reminder = (
            self.db.query(Reminder).filter(Reminder.magic_hash == magic_hash).first()
        )
        if reminder is None:
            return None
        return ReminderRecord.model_validate(reminder)

    def cancel(self, reminder_id: str) -> ReminderRecord:
        return self.set_status(reminder_id, ReminderStatus.CANCELLED)

    def list_recent(self, limit: int = 10) -> list[ReminderRecord]:
        reminders = (
            self.db.query(Reminder)
            .order_by(desc(Reminder.created_at))
            .limit(limit)
            .all()
        )
        return [ReminderRecord.model_validate(r) for r in reminders]

    def _update(self, reminder_id: str, *criteria, **values) -> int:
        statement = (
            update(Reminder)
            .where(Reminder.id == reminder_id, *criteria)
            .values(updated_at=utc_now(), **values)
            .execution_options(synchronize_session=False)
        )
        try:
            rowcount = self.db.execute(statement).rowcount
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return rowcount

    def _get(self, reminder_id: str) -> ReminderRecord:
        reminder = self.db.get(Reminder, reminder_id, populate_existing=True)
        if reminder is None:
            raise ReminderNotFoundError(f"Reminder {reminder_id} not found")
        return ReminderRecord.model_validate(reminder)
