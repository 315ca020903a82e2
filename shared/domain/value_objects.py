"""
Common Value Objects

- DateRange: half-open date interval [start_date, end_date)
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    start_date is inclusive, end_date is exclusive, so a booking
    of [Jan 1, Jan 6) occupies five days and a range starting on
    Jan 6 can follow it without overlapping.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date is None or self.end_date is None:
            raise ValidationError("Date range requires both start and end dates", field='start_date')
        if self.start_date >= self.end_date:
            raise ValidationError(
                f"Start date ({self.start_date}) must be before end date ({self.end_date})",
                field='end_date',
            )

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range shares at least one day with another

        Examples:
            - [25, 28) overlaps with [27, 30) -> True
            - [25, 28) overlaps with [28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start_date < other.end_date and other.start_date < self.end_date

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days

    def __len__(self) -> int:
        return self.days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
