"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

logger = logging.getLogger(__name__)


@shared_task(name="bookings.expire_pending_bookings")
def expire_pending_bookings() -> dict[str, int]:
    """
    Expire PENDING bookings whose hold window has elapsed.

    Not scheduled here: the sweep is triggered externally.

    Returns:
        dict: {"expired": number of bookings expired}
    """
    from apps.bookings.bootstrap import bootstrap

    try:
        expired = bootstrap().expire_overdue_bookings()
    except Exception as e:
        logger.error(f"Expiration sweep failed: {e}", exc_info=True)
        raise

    logger.info(f"Expiration sweep finished: {len(expired)} bookings expired")
    return {"expired": len(expired)}
