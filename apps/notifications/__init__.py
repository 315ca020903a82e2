"""Notifications app package.

Policy, channel registry and delivery for booking lifecycle
notifications. Delivery is best-effort and never fails the booking
operation that triggered it.
"""
