"""
Booking state machine

Pure yes/no decisions over a status value. Nothing here mutates a
booking; callers apply the new status and persist it themselves.
"""

from typing import Dict, FrozenSet, List

from apps.bookings.domain.enums import BookingStatus, PaymentStatus
from shared.domain.exceptions import StateTransitionError

VALID_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.EXPIRED,
    }),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.EXPIRED: frozenset(),
}

# Stable ordering for error payloads
_STATUS_ORDER = list(BookingStatus)


def get_valid_next_statuses(current: BookingStatus) -> List[BookingStatus]:
    allowed = VALID_TRANSITIONS.get(BookingStatus(current), frozenset())
    return [status for status in _STATUS_ORDER if status in allowed]


def is_terminal(status: BookingStatus) -> bool:
    return not VALID_TRANSITIONS.get(BookingStatus(status))


def can_transition(from_status: BookingStatus, to_status: BookingStatus) -> bool:
    """Same-status moves are always allowed (no-op)."""
    from_status, to_status = BookingStatus(from_status), BookingStatus(to_status)
    if from_status == to_status:
        return True
    return to_status in VALID_TRANSITIONS.get(from_status, frozenset())


def validate_transition(from_status: BookingStatus, to_status: BookingStatus) -> None:
    if can_transition(from_status, to_status):
        return

    from_status, to_status = BookingStatus(from_status), BookingStatus(to_status)
    valid = [status.value for status in get_valid_next_statuses(from_status)]
    raise StateTransitionError(
        f'Invalid state transition from "{from_status.value}" to "{to_status.value}". '
        f'Valid transitions from "{from_status.value}" are: {", ".join(valid) or "none"}',
        current_status=from_status.value,
        target_status=to_status.value,
        valid_transitions=valid,
    )


def can_modify(status: BookingStatus) -> bool:
    return BookingStatus(status) in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def can_cancel(status: BookingStatus) -> bool:
    return BookingStatus(status) in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def can_pay(status: BookingStatus, payment_status: PaymentStatus, is_expired: bool) -> bool:
    """Only an unpaid, unexpired PENDING booking accepts a payment."""
    return (
        BookingStatus(status) == BookingStatus.PENDING
        and PaymentStatus(payment_status) == PaymentStatus.UNPAID
        and not is_expired
    )
