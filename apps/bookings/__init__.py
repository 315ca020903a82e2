"""Bookings app package.

This app holds the booking lifecycle: the pure domain rules (dates,
state machine, snapshots, payment), the Booking aggregate, its ORM
models and repository, and the command handlers that tie them to the
catalog, guests and notifications. Double bookings are prevented at the
persistence boundary by locking the item row inside the insert
transaction.
"""
