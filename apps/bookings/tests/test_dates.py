from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from apps.bookings.domain import dates
from shared.domain.exceptions import ValidationError


def test_calculate_end_date_is_exclusive():
    assert dates.calculate_end_date(date(2025, 1, 1), 5) == date(2025, 1, 6)


def test_calculate_end_date_normalizes_time_of_day():
    end = dates.calculate_end_date(datetime(2025, 1, 1, 15, 30), 2)

    assert end == datetime(2025, 1, 3, 0, 0)


@pytest.mark.parametrize("start, days", [(None, 3), (date(2025, 1, 1), 0), (date(2025, 1, 1), None)])
def test_calculate_end_date_rejects_bad_input(start, days):
    with pytest.raises(ValidationError):
        dates.calculate_end_date(start, days)


@pytest.mark.parametrize("days", [1, 2, 7, 30, 365])
def test_duration_of_calculated_range_equals_days(days):
    start = date(2025, 3, 10)

    assert dates.calculate_duration_in_days(start, dates.calculate_end_date(start, days)) == days


def test_auto_calculate_dates():
    start = date(2025, 1, 1)

    assert dates.auto_calculate_dates(start, None, 3) == (start, date(2025, 1, 4))
    assert dates.auto_calculate_dates(start, date(2025, 1, 10), 3) == (start, date(2025, 1, 10))
    assert dates.auto_calculate_dates(start, None, None) == (start, None)
    assert dates.auto_calculate_dates(None, None, 3) == (None, None)


def test_validate_date_range_rejects_equal_dates():
    with pytest.raises(ValidationError):
        dates.validate_date_range(date(2025, 1, 1), date(2025, 1, 1))
    dates.validate_date_range(date(2025, 1, 1), date(2025, 1, 2))


def test_validate_future_date():
    today = date(2025, 6, 1)

    dates.validate_future_date(today, allow_today=True, reference=today)
    dates.validate_future_date(datetime(2025, 6, 2, 8), allow_today=False, reference=today)

    with pytest.raises(ValidationError):
        dates.validate_future_date(today - timedelta(days=1), reference=today)
    with pytest.raises(ValidationError):
        dates.validate_future_date(today, allow_today=False, reference=today)


def test_duration_bounds_are_skipped_without_dates():
    dates.validate_minimum_duration(None, date(2025, 1, 1), 3)
    dates.validate_maximum_duration(date(2025, 1, 1), None, 1)


def test_duration_bounds():
    start, end = date(2025, 1, 1), date(2025, 1, 4)

    dates.validate_minimum_duration(start, end, 3)
    dates.validate_maximum_duration(start, end, 3)
    with pytest.raises(ValidationError):
        dates.validate_minimum_duration(start, end, 4)
    with pytest.raises(ValidationError):
        dates.validate_maximum_duration(start, end, 2)


def test_duration_of_equal_dates_is_zero():
    assert dates.calculate_duration_in_days(date(2025, 1, 1), date(2025, 1, 1)) == 0


def test_ranges_overlap_scenarios():
    a = (date(2025, 1, 1), date(2025, 1, 6))
    b = (date(2025, 1, 4), date(2025, 1, 8))
    c = (date(2025, 1, 6), date(2025, 1, 10))

    assert dates.do_ranges_overlap(*a, *b) is True
    assert dates.do_ranges_overlap(*b, *a) is True
    assert dates.do_ranges_overlap(*a, *c) is False
    assert dates.do_ranges_overlap(*c, *a) is False


def test_now_is_aware_utc():
    assert dates.now().tzinfo is timezone.utc


@pytest.mark.parametrize("zone, expected", [
    ("UTC", date(2025, 1, 1)),
    ("Pacific/Kiritimati", date(2025, 1, 2)),
])
def test_today_follows_configured_time_zone(settings, zone, expected):
    settings.TIME_ZONE = zone

    with patch.object(dates, "now", return_value=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        assert dates.today() == expected
