"""
app/services/visitor_service.py

Purpose: One page session per browser

- Creates a visitor (client, session store, auth, flows) on first contact
  and rehydrates its session once
- Looks visitors up by their cookie id
- Drops visitors idle for longer than SESSION_TIMEOUT_MINUTES
- Serializes session mutations of one visitor with a lock
"""

import asyncio
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from app.core.config import settings
from app.core.logging import LogContext, get_logger
from app.flow.onboarding import OnboardingFlow
from app.flow.signup import LoginFlow, SignupFlow
from app.models.user import Session
from app.services.api_client import ApiClient
from app.services.auth_service import AuthService
from app.services.profile_service import ProfileService
from app.services.session_store import SessionStore
from utils.time_utils import is_session_expired

logger = get_logger(__name__)

PURGE_INTERVAL = timedelta(minutes=1)


@dataclass
class VisitorContext:
    """Everything that lives for as long as one browser's page session."""
    visitor_id: str
    client: ApiClient
    store: SessionStore
    auth: AuthService
    profiles: ProfileService
    signup: SignupFlow
    login: LoginFlow
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_interaction: datetime = field(default_factory=datetime.utcnow)

    @property
    def session(self) -> Session:
        return self.store.session

    def onboarding(self) -> OnboardingFlow:
        """A fresh onboarding attempt; drafts are never kept."""
        return OnboardingFlow(self.auth, self.profiles)

    def touch(self):
        self.last_interaction = datetime.utcnow()

    def log_context(self, **fields) -> LogContext:
        user = self.store.user
        return LogContext(
            visitor_id=self.visitor_id[:8],
            user_id=user.id if user else None,
            role=user.role.value if user else None,
            **fields
        )

    async def close(self):
        self.signup.close()
        self.login.close()
        await self.client.close()


class VisitorService:
    """
    In-memory registry of visitors.

    Args:
        client_factory: Builds the backend client of a new visitor
        timeout_minutes: Idle time after which a visitor is dropped
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], ApiClient]] = None,
        timeout_minutes: Optional[int] = None
    ):
        self._client_factory = client_factory or ApiClient
        self._timeout_minutes = timeout_minutes or settings.SESSION_TIMEOUT_MINUTES
        self._visitors: Dict[str, VisitorContext] = {}
        self._last_purge = datetime.utcnow()

    def __len__(self) -> int:
        return len(self._visitors)

    def get(self, visitor_id: Optional[str]) -> Optional[VisitorContext]:
        if not visitor_id:
            return None
        visitor = self._visitors.get(visitor_id)
        if visitor and is_session_expired(visitor.last_interaction, self._timeout_minutes):
            return None
        return visitor

    async def get_or_create(self, visitor_id: Optional[str]) -> VisitorContext:
        """
        Returns the visitor for a cookie id, creating a new one (with a new id)
        when the id is unknown or expired.
        """
        await self._maybe_purge()

        visitor = self.get(visitor_id)
        if visitor:
            visitor.touch()
            return visitor

        if visitor_id in self._visitors:
            await self.drop(visitor_id)

        return await self.create()

    async def create(self) -> VisitorContext:
        visitor_id = secrets.token_urlsafe(24)
        client = self._client_factory()
        store = SessionStore()
        auth = AuthService(client, store)

        visitor = VisitorContext(
            visitor_id=visitor_id,
            client=client,
            store=store,
            auth=auth,
            profiles=ProfileService(client),
            signup=SignupFlow(auth, store),
            login=LoginFlow(auth, store),
        )
        # Registered before the session check so that a concurrent request
        # for the same visitor sees the loading session.
        self._visitors[visitor_id] = visitor
        logger.info(f"New visitor {visitor_id[:8]}...")

        async with visitor.lock:
            await auth.check_session()

        return visitor

    async def drop(self, visitor_id: str):
        visitor = self._visitors.pop(visitor_id, None)
        if visitor:
            await visitor.close()
            logger.debug(f"Dropped visitor {visitor_id[:8]}...")

    async def purge_expired(self) -> int:
        """
        Drops every idle visitor.

        Returns:
            Number of visitors dropped
        """
        expired = [
            visitor_id
            for visitor_id, visitor in self._visitors.items()
            if is_session_expired(visitor.last_interaction, self._timeout_minutes)
        ]
        for visitor_id in expired:
            await self.drop(visitor_id)

        if expired:
            logger.info(f"Purged {len(expired)} idle visitor(s)")
        self._last_purge = datetime.utcnow()
        return len(expired)

    async def _maybe_purge(self):
        if datetime.utcnow() - self._last_purge > PURGE_INTERVAL:
            await self.purge_expired()

    async def close(self):
        for visitor_id in list(self._visitors):
            await self.drop(visitor_id)


# Global visitor service instance
_visitor_service: Optional[VisitorService] = None


def get_visitor_service() -> VisitorService:
    """Get or create the global visitor service instance."""
    global _visitor_service
    if _visitor_service is None:
        _visitor_service = VisitorService()
    return _visitor_service


async def close_visitor_service():
    """Drop every visitor and release their HTTP clients."""
    global _visitor_service
    if _visitor_service:
        await _visitor_service.close()
        _visitor_service = None
