"""Guests app package.

Session-scoped guests. A booking keeps a reference to its guest and reads
contact details from here when notifications go out.
"""
