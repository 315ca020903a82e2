"""Payment rules layered on top of the booking state machine."""

from apps.bookings.domain import state
from apps.bookings.domain.enums import BookingStatus, PaymentStatus
from shared.domain.exceptions import ValidationError

STATUS_AFTER_PAYMENT = BookingStatus.CONFIRMED
PAYMENT_STATUS_AFTER_PAYMENT = PaymentStatus.PAID


def can_refund(payment_status: PaymentStatus) -> bool:
    return PaymentStatus(payment_status) == PaymentStatus.PAID


def payment_status_after_cancellation(payment_status: PaymentStatus) -> PaymentStatus:
    """A paid booking is marked refunded on cancellation; otherwise unchanged."""
    if can_refund(payment_status):
        return PaymentStatus.REFUNDED
    return PaymentStatus(payment_status)


def validate_can_pay(status: BookingStatus, payment_status: PaymentStatus, is_expired: bool) -> None:
    """Raise a ValidationError naming the reason a payment is refused."""
    if state.can_pay(status, payment_status, is_expired):
        return

    status, payment_status = BookingStatus(status), PaymentStatus(payment_status)
    if payment_status == PaymentStatus.PAID:
        raise ValidationError('Booking already paid', field='payment_status')
    if status == BookingStatus.CANCELLED:
        raise ValidationError('Cannot pay for cancelled booking', field='status')
    if is_expired or status == BookingStatus.EXPIRED:
        raise ValidationError('Cannot pay for expired booking', field='status')
    if status != BookingStatus.PENDING:
        raise ValidationError(f'Cannot pay for booking in status "{status.value}"', field='status')
    raise ValidationError(
        f'Cannot pay for booking with payment status "{payment_status.value}"',
        field='payment_status',
    )
