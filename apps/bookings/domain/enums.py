"""Enumerations shared by the booking domain modules."""

from enum import Enum


class ItemType(str, Enum):
    """What is being booked"""
    PACKAGE = 'package'     # Package tour, priced per person
    ACTIVITY = 'activity'   # Activity, priced per person
    CAR = 'car'             # Car rental, priced per day


class BookingStatus(str, Enum):
    """
    Booking lifecycle

    - PENDING -> CONFIRMED (payment recorded)
    - PENDING -> CANCELLED (guest cancelled before paying)
    - PENDING -> EXPIRED (hold window elapsed without payment)
    - CONFIRMED -> CANCELLED
    CANCELLED and EXPIRED are terminal.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    EXPIRED = 'expired'


class PaymentStatus(str, Enum):
    UNPAID = 'unpaid'
    PAID = 'paid'
    REFUNDED = 'refunded'
    FAILED = 'failed'
