"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Visitor idle deadline and expiry checks
"""

from datetime import datetime, timedelta
from typing import Optional


def idle_deadline(last_interaction: datetime, timeout_minutes: int) -> datetime:
    """The moment a visitor last seen at `last_interaction` expires."""
    return last_interaction + timedelta(minutes=timeout_minutes)


def is_session_expired(
    last_interaction: Optional[datetime],
    timeout_minutes: int = 30,
    now: Optional[datetime] = None
) -> bool:
    """
    Checks if a visitor session has been idle for longer than the timeout.

    Args:
        last_interaction: Last request of the visitor (UTC)
        timeout_minutes: Allowed idle time
        now: Reference time, defaults to the current UTC time

    Returns:
        True if the session expired (or was never active)
    """
    if not last_interaction:
        return True

    return (now or datetime.utcnow()) > idle_deadline(last_interaction, timeout_minutes)
