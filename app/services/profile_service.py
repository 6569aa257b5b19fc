"""
app/services/profile_service.py

Purpose: Role-specific profile creation

- Job seekers: POST /users/profile/job-seeker
- Employers: POST /users/profile/employer
"""

from typing import Any, Dict

from app.core.exceptions import ApiError, ErrorKind, ValidationError
from app.core.logging import get_logger
from app.models.user import Role
from app.services.api_client import ApiClient
from utils.constants import PROFILE_FAILED_MESSAGE

logger = get_logger(__name__)

PROFILE_ENDPOINTS = {
    Role.JOB_SEEKER: "/users/profile/job-seeker",
    Role.EMPLOYER: "/users/profile/employer",
}


class ProfileService:
    """Creates the profile record that completes onboarding."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def create_profile(self, role: Role, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sends a profile-creation request for the given role.

        Raises:
            ValidationError: For roles without a self-service profile
            ApiError: If the backend rejects the profile
        """
        endpoint = PROFILE_ENDPOINTS.get(role)
        if endpoint is None:
            raise ValidationError(f"{role.value} accounts do not have a self-service profile")

        body = await self._client.post(endpoint, {**payload, "role": role.value})
        if body.get("success") is False:
            raise ApiError(body.get("message") or PROFILE_FAILED_MESSAGE, kind=ErrorKind.VALIDATION, status_code=400)

        logger.info(f"Created {role.value} profile")
        return body
