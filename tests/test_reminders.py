"""Tests for arming reminders."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.models.reminder import Reminder, ReminderStatus
from app.services.email import NotificationIntent


def parse_utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# =============================================================================
# Creation flow
# =============================================================================


class TestArmReminder:
    """Tests for arm_reminder without the HTTP layer."""

    def test_safe_mode_deadline_and_trigger(self, store):
        from app.schemas.reminder import ReminderCreate
        from app.services.reminders import arm_reminder

        data = ReminderCreate(
            service_name="Netflix",
            date="2025-01-10",
            email="test@example.com",
            timezone_offset=0,
            safe_mode=True,
        )
        reminder = arm_reminder(store, data, now=datetime(2025, 1, 1, tzinfo=timezone.utc))

        assert reminder.trial_end_utc == datetime(2025, 1, 10, 0, 0, 1, tzinfo=timezone.utc)
        assert reminder.egress_trigger_utc == datetime(2025, 1, 8, 0, 0, 1, tzinfo=timezone.utc)
        assert reminder.status == ReminderStatus.PENDING

    def test_offset_applied_to_deadline(self, store):
        from app.schemas.reminder import ReminderCreate
        from app.services.reminders import arm_reminder

        data = ReminderCreate(
            service_name="Spotify",
            date="2025-01-10",
            email="test@example.com",
            timezone_offset=-300,
        )
        reminder = arm_reminder(store, data, now=datetime(2025, 1, 1, tzinfo=timezone.utc))

        assert reminder.trial_end_utc == datetime(2025, 1, 10, 5, 0, 1, tzinfo=timezone.utc)
        assert reminder.timezone_offset == -300

    def test_retries_magic_hash_collision(self, store, make_reminder):
        from app.schemas.reminder import ReminderCreate
        from app.services.reminders import arm_reminder

        existing = make_reminder()
        data = ReminderCreate(service_name="Hulu", date="2030-01-10", email="test@example.com")

        with patch(
            "app.services.reminders.generate_magic_hash",
            side_effect=[existing.magic_hash, "c" * 64],
        ):
            reminder = arm_reminder(store, data)

        assert reminder.magic_hash == "c" * 64

    def test_gives_up_after_repeated_collisions(self, store, make_reminder):
        from app.schemas.reminder import ReminderCreate
        from app.services.reminders import arm_reminder
        from app.services.store import ConflictError

        existing = make_reminder()
        data = ReminderCreate(service_name="Hulu", date="2030-01-10", email="test@example.com")

        with patch("app.services.reminders.generate_magic_hash", return_value=existing.magic_hash):
            with pytest.raises(ConflictError):
                arm_reminder(store, data)


class TestCreateReminderEndpoint:
    """Tests for POST /reminders."""

    def _payload(self, **overrides):
        payload = {
            "serviceName": "Netflix",
            "date": str(date.today() + timedelta(days=10)),
            "email": "Test@Example.com",
            "timezoneOffset": 0,
            "safeMode": True,
        }
        payload.update(overrides)
        return payload

    def test_create_reminder(self, client, db_session):
        response = client.post("/reminders", json=self._payload())
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        ticket = data["reminder"]
        assert ticket["serviceName"] == "Netflix"

        deadline = parse_utc(ticket["deadline"])
        expected_deadline = datetime.combine(
            date.today() + timedelta(days=10), datetime.min.time(), tzinfo=timezone.utc
        ) + timedelta(seconds=1)
        assert deadline == expected_deadline
        assert parse_utc(ticket["triggerTime"]) == deadline - timedelta(hours=48)
        assert set(ticket["timeRemaining"]) == {"days", "hours", "minutes", "totalHours"}
        assert ticket["timeRemaining"]["days"] in (6, 7, 8)

        stored = db_session.query(Reminder).filter(Reminder.id == ticket["id"]).one()
        assert stored.user_email == "test@example.com"
        assert stored.status == ReminderStatus.PENDING
        assert len(stored.magic_hash) == 64

    def test_response_does_not_leak_token(self, client):
        response = client.post("/reminders", json=self._payload())
        assert "magicHash" not in response.json()["reminder"]
        assert "magic_hash" not in response.text

    def test_short_trial_fires_soon(self, client):
        """A trial ending within 48h gets a trigger five minutes out."""
        soon = datetime.now(timezone.utc) + timedelta(hours=1)
        before = datetime.now(timezone.utc)
        response = client.post(
            "/reminders",
            json=self._payload(date=soon.replace(tzinfo=None).isoformat(), safeMode=False),
        )
        after = datetime.now(timezone.utc)
        assert response.status_code == 201

        trigger = parse_utc(response.json()["reminder"]["triggerTime"])
        assert before + timedelta(minutes=5) <= trigger <= after + timedelta(minutes=5)

    def test_sends_confirmation(self, client, notifier):
        response = client.post("/reminders", json=self._payload())
        assert response.status_code == 201

        notifier.send.assert_called_once()
        reminder, intent = notifier.send.call_args.args
        assert intent == NotificationIntent.CONFIRMATION
        assert reminder.id == response.json()["reminder"]["id"]

    def test_confirmation_failure_does_not_fail_request(self, client, notifier):
        notifier.send.side_effect = RuntimeError("provider down")

        response = client.post("/reminders", json=self._payload())
        assert response.status_code == 201

    def test_accepts_snake_case_keys(self, client):
        payload = {
            "service_name": "Spotify",
            "date": str(date.today() + timedelta(days=5)),
            "email": "test@example.com",
            "timezone_offset": 60,
            "safe_mode": False,
        }
        response = client.post("/reminders", json=payload)
        assert response.status_code == 201

    @pytest.mark.parametrize("missing", ["serviceName", "date", "email"])
    def test_missing_required_field(self, client, missing):
        payload = self._payload()
        del payload[missing]

        response = client.post("/reminders", json=payload)
        assert response.status_code == 422
        fields = [error["loc"][-1] for error in response.json()["detail"]]
        assert missing in fields

    def test_blank_service_name(self, client):
        response = client.post("/reminders", json=self._payload(serviceName="   "))
        assert response.status_code == 422

    @pytest.mark.parametrize("email", ["not-an-email", "user@", "user@domain", "a b@example.com"])
    def test_invalid_email(self, client, email):
        response = client.post("/reminders", json=self._payload(email=email))
        assert response.status_code == 422

    @pytest.mark.parametrize("bad_date", ["tomorrow", "2025-13-40", ""])
    def test_invalid_date(self, client, bad_date):
        response = client.post("/reminders", json=self._payload(date=bad_date))
        assert response.status_code == 422

    @pytest.mark.parametrize("offset", [-721, 841])
    def test_offset_out_of_range(self, client, offset):
        response = client.post("/reminders", json=self._payload(timezoneOffset=offset))
        assert response.status_code == 422

    def test_invalid_request_has_no_side_effects(self, client, db_session, notifier):
        client.post("/reminders", json=self._payload(email="nope"))

        assert db_session.query(Reminder).count() == 0
        notifier.send.assert_not_called()
