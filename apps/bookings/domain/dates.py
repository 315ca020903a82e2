"""
Date interval rules for bookings

All ranges use the half-open convention [start, end):
- start is INCLUSIVE (the booking begins on that day)
- end is EXCLUSIVE (the booking is over before that day begins)

With this convention two bookings that touch at a boundary
(end1 == start2) do not overlap, which allows back-to-back
reservations of the same resource.

Functions accept either ``date`` or ``datetime`` values. Calculations that
are defined on calendar days strip the time component first.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from django.utils import timezone

from shared.domain.base import utcnow
from shared.domain.exceptions import ValidationError

DateLike = Union[date, datetime]

SECONDS_PER_DAY = 24 * 60 * 60


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _midnight(value: DateLike) -> DateLike:
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return value


def now() -> datetime:
    """Aware UTC timestamp used for hold expiry and lifecycle stamps"""
    return utcnow()


def today() -> date:
    """Current calendar day in the configured TIME_ZONE"""
    return timezone.localdate(now())


def calculate_end_date(start_date: Optional[DateLike], number_of_days: Optional[int]) -> DateLike:
    """
    End date (exclusive) of a booking lasting ``number_of_days``

    Example:
        start 2025-01-01, 5 days -> 2025-01-06
        the booking covers Jan 1 up to, but not including, Jan 6
    """
    if start_date is None:
        raise ValidationError('Start date is required to calculate end date', field='start_date')
    if not number_of_days or number_of_days < 1:
        raise ValidationError('Number of days must be at least 1', field='number_of_days')

    return _midnight(start_date + timedelta(days=number_of_days))


def auto_calculate_dates(
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
    number_of_days: Optional[int] = None,
) -> Tuple[Optional[DateLike], Optional[DateLike]]:
    """
    Fill in end_date from start_date + number_of_days when it is missing

    An explicit end_date always wins; without a start date or a usable
    day count the inputs are returned unchanged.
    """
    if start_date is None or end_date is not None:
        return start_date, end_date
    if number_of_days and number_of_days >= 1:
        return start_date, calculate_end_date(start_date, number_of_days)
    return start_date, end_date


def validate_date_range(start_date: Optional[DateLike], end_date: Optional[DateLike]) -> None:
    if start_date is None:
        raise ValidationError('Start date is required', field='start_date')
    if end_date is None:
        raise ValidationError('End date is required', field='end_date')
    if start_date >= end_date:
        raise ValidationError('Start date must be before end date', field='end_date')


def validate_future_date(
    value: Optional[DateLike],
    allow_today: bool = True,
    reference: Optional[date] = None,
) -> None:
    """
    Reject dates in the past, comparing calendar days only

    ``reference`` defaults to today; it exists so callers holding their
    own clock can pass it in.
    """
    if value is None:
        raise ValidationError('Date is required', field='start_date')

    current = _as_date(reference) if reference is not None else today()
    candidate = _as_date(value)

    if allow_today:
        if candidate < current:
            raise ValidationError('Date must be today or in the future', field='start_date')
    elif candidate <= current:
        raise ValidationError('Date must be in the future', field='start_date')


def calculate_duration_in_days(start_date: Optional[DateLike], end_date: Optional[DateLike]) -> int:
    """Whole days between two dates; 0 when either is missing or they are equal"""
    if start_date is None or end_date is None:
        return 0
    delta = _as_date(end_date) - _as_date(start_date)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def validate_minimum_duration(
    start_date: Optional[DateLike],
    end_date: Optional[DateLike],
    min_days: int = 1,
) -> None:
    if start_date is None or end_date is None:
        return

    duration = calculate_duration_in_days(start_date, end_date)
    if duration < min_days:
        raise ValidationError(
            f'Minimum duration is {min_days} day(s), but got {duration} day(s)',
            field='end_date',
        )


def validate_maximum_duration(
    start_date: Optional[DateLike],
    end_date: Optional[DateLike],
    max_days: int,
) -> None:
    if start_date is None or end_date is None:
        return

    duration = calculate_duration_in_days(start_date, end_date)
    if duration > max_days:
        raise ValidationError(
            f'Maximum duration is {max_days} day(s), but got {duration} day(s)',
            field='end_date',
        )


def do_ranges_overlap(start1: DateLike, end1: DateLike, start2: DateLike, end2: DateLike) -> bool:
    """
    True when [start1, end1) and [start2, end2) share at least one instant

    Strict comparisons because end dates are exclusive:
        [Jan 1, Jan 6) vs [Jan 4, Jan 8)  -> True
        [Jan 1, Jan 6) vs [Jan 6, Jan 10) -> False
    """
    return start1 < end2 and start2 < end1
