"""Bounded contexts: catalog, guests, bookings, pricing and notifications."""
