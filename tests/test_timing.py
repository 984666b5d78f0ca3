"""Tests for the time model."""

from datetime import datetime, timedelta, timezone

import pytest

from app.services.timing import (
    as_utc,
    calculate_egress_trigger,
    calculate_time_remaining,
    format_date_for_timezone,
    local_to_utc,
    normalize_to_safe_time,
    utc_to_local,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestSafeTime:
    def test_safe_mode_pins_start_of_day(self):
        value = datetime(2025, 1, 10, 18, 45, 30, 123)
        assert normalize_to_safe_time(value, True) == datetime(2025, 1, 10, 0, 0, 1)

    def test_safe_mode_off_keeps_value(self):
        value = datetime(2025, 1, 10, 18, 45, 30)
        assert normalize_to_safe_time(value, False) == value


class TestOffsets:
    def test_local_to_utc_subtracts_offset(self):
        # 09:00 in UTC+5:30 is 03:30 UTC
        result = local_to_utc(datetime(2025, 1, 10, 9, 0), 330)
        assert result == datetime(2025, 1, 10, 3, 30, tzinfo=timezone.utc)

    def test_negative_offset_crosses_day(self):
        # 22:00 in UTC-5 is 03:00 UTC the next day
        result = local_to_utc(datetime(2025, 1, 10, 22, 0), -300)
        assert result == datetime(2025, 1, 11, 3, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("offset", [-720, -300, 0, 60, 330, 345, 840])
    def test_round_trip_within_offset(self, offset):
        local = datetime(2025, 3, 30, 0, 0, 1)
        assert utc_to_local(local_to_utc(local, offset), offset) == local

    def test_as_utc_treats_naive_as_utc(self):
        assert as_utc(datetime(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestEgressTrigger:
    def test_long_trial_fires_48_hours_before(self):
        trial_end = datetime(2025, 1, 10, 0, 0, 1, tzinfo=timezone.utc)
        trigger = calculate_egress_trigger(trial_end, 0, now=NOW)
        assert trigger == datetime(2025, 1, 8, 0, 0, 1, tzinfo=timezone.utc)

    def test_short_trial_fires_five_minutes_from_now(self):
        trial_end = NOW + timedelta(hours=1)
        trigger = calculate_egress_trigger(trial_end, 0, now=NOW)
        assert trigger == NOW + timedelta(minutes=5)

    @pytest.mark.parametrize("hours_ahead", [1, 24, 48, 49, 500])
    def test_trigger_between_floor_and_deadline(self, hours_ahead):
        trial_end = NOW + timedelta(hours=hours_ahead)
        trigger = calculate_egress_trigger(trial_end, -300, now=NOW)
        assert trigger >= NOW + timedelta(minutes=5)
        assert trigger <= trial_end

    def test_offset_does_not_change_result(self):
        trial_end = NOW + timedelta(days=5)
        assert calculate_egress_trigger(trial_end, 0, now=NOW) == calculate_egress_trigger(
            trial_end, 600, now=NOW
        )


class TestTimeRemaining:
    def test_ninety_minutes(self):
        result = calculate_time_remaining(NOW + timedelta(minutes=90), now=NOW)
        assert result == {"days": 0, "hours": 1, "minutes": 30, "total_hours": 1}

    def test_multiple_days(self):
        result = calculate_time_remaining(NOW + timedelta(days=2, hours=3, minutes=4), now=NOW)
        assert result == {"days": 2, "hours": 3, "minutes": 4, "total_hours": 51}

    @pytest.mark.parametrize("delta", [timedelta(0), timedelta(minutes=-1), timedelta(days=-3)])
    def test_past_or_now_is_zero(self, delta):
        result = calculate_time_remaining(NOW + delta, now=NOW)
        assert result == {"days": 0, "hours": 0, "minutes": 0, "total_hours": 0}


class TestFormatting:
    def test_utc_label(self):
        value = datetime(2025, 1, 10, 0, 0, 1, tzinfo=timezone.utc)
        assert format_date_for_timezone(value, 0) == "Jan 10, 2025, 12:00 AM UTC"

    def test_negative_offset(self):
        value = datetime(2025, 1, 10, 20, 30, tzinfo=timezone.utc)
        assert format_date_for_timezone(value, -300) == "Jan 10, 2025, 03:30 PM GMT-5"

    def test_half_hour_offset(self):
        value = datetime(2025, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert format_date_for_timezone(value, 330) == "Jan 10, 2025, 05:30 AM GMT+5:30"
