"""
app/services/session_store.py

Purpose: Single source of truth for "who is logged in"

- Holds the current immutable Session snapshot
- Replaces it on every change and notifies subscribers
- Subscriptions are released through the callable returned by subscribe()
"""

import dataclasses
from typing import Callable, List, Optional

from app.core.logging import get_logger
from app.models.user import Session, User

logger = get_logger(__name__)

Subscriber = Callable[[Session], None]


class SessionStore:
    """
    Session snapshot holder.

    Only AuthService writes to the store; everything else reads `session` or
    subscribes.
    """

    def __init__(self, initial: Optional[Session] = None):
        self._session = initial or Session()
        self._subscribers: List[Subscriber] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Registers a callback invoked with every new snapshot.

        Returns:
            A callable that removes the subscription (safe to call twice)
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def replace(self, **changes) -> Session:
        """
        Publishes a new snapshot built from the current one.

        Args:
            **changes: Session fields to change (user, is_loading)

        Returns:
            The new snapshot
        """
        previous = self._session
        self._session = dataclasses.replace(previous, **changes)

        if self._session.user != previous.user:
            user_id = self._session.user.id if self._session.user else None
            logger.debug(f"Session user changed: {user_id}")

        for callback in list(self._subscribers):
            try:
                callback(self._session)
            except Exception as e:
                logger.error(f"Session subscriber failed: {e}", exc_info=True)

        return self._session

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
