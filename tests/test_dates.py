"""
Date rules: expiration arithmetic and the expired / expiring-soon predicates.
"""

from datetime import date, datetime, timedelta

import pytest

from app.errors import InvalidDateError
from app.utils.dates import (
    compute_expiration,
    expiry_alert,
    format_date,
    is_expired,
    is_expiring_soon,
    parse_date,
)
from conftest import make_record


class TestParseDate:
    def test_accepts_iso_strings_and_dates(self):
        assert parse_date("2024-03-05") == date(2024, 3, 5)
        assert parse_date(" 2024-03-05 ") == date(2024, 3, 5)
        assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)
        assert parse_date(datetime(2024, 3, 5, 10, 30)) == date(2024, 3, 5)

    @pytest.mark.parametrize("value", ["", "05/03/2024", "2024-02-30", "2024-13-01", "20240305", None, 20240305])
    def test_rejects_everything_else(self, value):
        with pytest.raises(InvalidDateError):
            parse_date(value)

    def test_invalid_date_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_date("nope")


class TestComputeExpiration:
    def test_adds_one_calendar_year(self):
        assert compute_expiration("2024-01-10") == date(2025, 1, 10)
        assert compute_expiration(date(2023, 12, 31)) == date(2024, 12, 31)

    def test_leap_day_clamps_to_feb_28(self):
        assert compute_expiration("2024-02-29") == date(2025, 2, 28)

    def test_span_is_365_or_366_days(self):
        start = date(2022, 1, 1)
        for offset in range(0, 1500, 7):
            activated = start + timedelta(days=offset)
            assert (compute_expiration(activated) - activated).days in (365, 366)

    def test_unparseable_activation_raises(self):
        with pytest.raises(InvalidDateError):
            compute_expiration("not a date")

    @pytest.mark.parametrize("value", ["9999-12-31", "9999-01-01"])
    def test_last_representable_year_raises(self, value):
        with pytest.raises(InvalidDateError):
            compute_expiration(value)


class TestExpiryPredicates:
    today = date(2024, 6, 1)

    def test_expired_only_strictly_before_today(self):
        assert is_expired("2024-05-31", self.today)
        assert not is_expired("2024-06-01", self.today)
        assert not is_expired("2024-06-02", self.today)

    def test_expiring_soon_window(self):
        assert is_expiring_soon("2024-06-02", self.today)
        assert is_expiring_soon("2024-06-11", self.today)
        assert not is_expiring_soon("2024-06-12", self.today)

    def test_expiration_today_is_neither(self):
        assert not is_expiring_soon("2024-06-01", self.today)
        assert not is_expired("2024-06-01", self.today)

    def test_past_dates_are_never_expiring_soon(self):
        assert not is_expiring_soon("2024-05-25", self.today)

    def test_predicates_are_mutually_exclusive(self):
        for offset in range(-30, 30):
            expiration = self.today + timedelta(days=offset)
            assert not (is_expired(expiration, self.today) and is_expiring_soon(expiration, self.today))
            assert is_expired(expiration, self.today) == (expiration < self.today)

    def test_bad_expiration_raises(self):
        with pytest.raises(InvalidDateError):
            is_expired("soon", self.today)


class TestExpiryAlert:
    def test_flags_active_records_only(self):
        today = date(2025, 1, 5)
        # activation 2024-01-10 -> expires 2025-01-10
        assert expiry_alert(make_record(status="active"), today) == "expiring_soon"
        assert expiry_alert(make_record(status="inactive"), today) is None
        assert expiry_alert(make_record(status="active"), date(2025, 2, 1)) == "expired"
        assert expiry_alert(make_record(status="active"), date(2024, 6, 1)) is None


def test_format_date():
    assert format_date("2024-01-10") == "10 Jan 2024"
    assert format_date(None) == "-"
    assert format_date("garbage") == "garbage"
