"""
app/flow/onboarding.py

Purpose: Profile completion

The route guard sends every signed-in user without a profile here. The page
collects a role-specific draft, creates the profile, refreshes the user so the
new hasProfile flag is picked up, and sends the user to their dashboard.

Drafts live only for one submission; nothing is kept between requests.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import EmployMeError
from app.core.logging import get_logger
from app.flow.guard import dashboard_for
from app.models.user import Role, User
from app.schemas.profile import EmployerDraft, JobSeekerDraft
from app.services.auth_service import AuthService
from app.services.profile_service import ProfileService
from utils.constants import (
    COMPANY_SIZES,
    DEFAULT_COUNTRY_CODE,
    INDUSTRIES,
    PROFILE_CREATED_MESSAGE,
    PROFILE_FAILED_MESSAGE,
)

logger = get_logger(__name__)

DRAFTS = {
    Role.JOB_SEEKER: JobSeekerDraft,
    Role.EMPLOYER: EmployerDraft,
}

ROLE_TEXT = {
    Role.JOB_SEEKER: "Job Seeker",
    Role.EMPLOYER: "Employer",
}


@dataclass
class OnboardingResult:
    draft: Dict[str, Any]
    error: Optional[str] = None
    notice: Optional[str] = None
    redirect: Optional[str] = None

    def to_state(self) -> Dict[str, Any]:
        return {
            "draft": self.draft,
            "error": self.error,
            "notice": self.notice,
            "options": {"industries": INDUSTRIES, "companySizes": COMPANY_SIZES},
        }


def empty_draft(user: User) -> Dict[str, Any]:
    """
    The blank form for the user's role. Job seekers get their name pre-filled.
    """
    if user.role is Role.EMPLOYER:
        return {
            "companyName": "",
            "title": "",
            "companySize": "",
            "industry": "",
            "website": "",
            "phone": "",
            "countryCode": DEFAULT_COUNTRY_CODE,
            "location": "",
            "description": "",
            "founded": 0,
        }
    return {
        "fullName": user.full_name,
        "phone": "",
        "countryCode": DEFAULT_COUNTRY_CODE,
        "location": "",
        "bio": "",
        "experience": "",
        "skills": [],
        "education": "",
    }


def first_error_message(error: SchemaValidationError) -> str:
    """Turns pydantic's first error into a sentence for the form banner."""
    first = error.errors()[0]
    message = first.get("msg", PROFILE_FAILED_MESSAGE)
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message


class OnboardingFlow:
    """One onboarding attempt for a signed-in user."""

    def __init__(self, auth: AuthService, profiles: ProfileService):
        self._auth = auth
        self._profiles = profiles

    def view(self, user: User) -> OnboardingResult:
        return OnboardingResult(draft=empty_draft(user))

    async def submit(self, user: User, data: Dict[str, Any]) -> OnboardingResult:
        """
        Validates and creates the profile, then refreshes the user.

        Args:
            user: The signed-in user
            data: Submitted form fields (camelCase)

        Returns:
            OnboardingResult with either an inline error or a dashboard redirect
        """
        draft_model = DRAFTS.get(user.role)
        if draft_model is None:
            return OnboardingResult(
                draft=data,
                error=f"{user.role.value} accounts do not have a self-service profile"
            )

        try:
            draft = draft_model.model_validate(data)
        except SchemaValidationError as e:
            logger.info(f"Onboarding draft rejected: {e.error_count()} error(s)")
            return OnboardingResult(draft=data, error=first_error_message(e))

        try:
            await self._profiles.create_profile(user.role, draft.to_payload())
        except EmployMeError as e:
            return OnboardingResult(draft=data, error=e.message or PROFILE_FAILED_MESSAGE)

        await self._auth.refresh_user()

        logger.info(f"Onboarding complete for {user.role.value} user {user.id}")
        return OnboardingResult(
            draft={},
            notice=PROFILE_CREATED_MESSAGE.format(role_text=ROLE_TEXT[user.role]),
            redirect=dashboard_for(user.role),
        )
