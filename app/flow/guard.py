"""
app/flow/guard.py

Purpose: Route guard

- Decides whether a protected page renders, shows a loading view,
  or redirects elsewhere
- Checks are evaluated in a fixed order; the first match wins:

    1. session loading                 -> LOADING
    2. no user                         -> REDIRECT /login
    3. require_role != user.role       -> REDIRECT role dashboard
    4. no profile, not onboarding page -> REDIRECT /onboarding
    5. profile, onboarding page        -> REDIRECT role dashboard
    6. otherwise                       -> RENDER

  A wrong-role user is sent to their own dashboard even when they also lack
  a profile.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.models.user import Role, Session, User
from utils.constants import (
    EMPLOYER_DASHBOARD_PATH,
    JOB_SEEKER_DASHBOARD_PATH,
    JOB_SEEKER_HOME_PATH,
    LOGIN_PATH,
    ONBOARDING_PATH,
)


class GuardAction(str, Enum):
    LOADING = "LOADING"
    REDIRECT = "REDIRECT"
    RENDER = "RENDER"


@dataclass(frozen=True)
class RouteRequirements:
    """What a route asks of the visitor before it renders."""
    require_onboarding: bool = False
    require_role: Optional[Role] = None


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    location: Optional[str] = None
    reason: str = ""

    @classmethod
    def redirect(cls, location: str, reason: str) -> "GuardDecision":
        return cls(GuardAction.REDIRECT, location, reason)


def dashboard_for(role: Role) -> str:
    """Employers have their own dashboard; everyone else lands on the job-seeker one."""
    if role is Role.EMPLOYER:
        return EMPLOYER_DASHBOARD_PATH
    return JOB_SEEKER_DASHBOARD_PATH


def landing_path_for(user: User) -> str:
    """Where the login and signup pages send a visitor who is already signed in."""
    if not user.has_profile:
        return ONBOARDING_PATH
    if user.role is Role.EMPLOYER:
        return EMPLOYER_DASHBOARD_PATH
    return JOB_SEEKER_HOME_PATH


def evaluate_guard(session: Session, requirements: RouteRequirements, path: str) -> GuardDecision:
    """
    Evaluates a route's requirements against the current session.

    Args:
        session: Current session snapshot
        requirements: Declared requirements of the route
        path: Path being visited

    Returns:
        GuardDecision
    """
    if session.is_loading:
        return GuardDecision(GuardAction.LOADING, reason="loading")

    user = session.user
    if user is None:
        return GuardDecision.redirect(LOGIN_PATH, "unauthenticated")

    if requirements.require_role is not None and user.role is not requirements.require_role:
        return GuardDecision.redirect(dashboard_for(user.role), "role_mismatch")

    if not user.has_profile and not requirements.require_onboarding and path != ONBOARDING_PATH:
        return GuardDecision.redirect(ONBOARDING_PATH, "onboarding_required")

    if user.has_profile and requirements.require_onboarding:
        return GuardDecision.redirect(dashboard_for(user.role), "onboarding_complete")

    return GuardDecision(GuardAction.RENDER, reason="allowed")
