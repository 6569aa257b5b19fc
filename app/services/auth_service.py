"""
app/services/auth_service.py

Purpose: Authentication operations

- Rehydrates the session from the backend ("who am I")
- Login, registration, logout, email verification
- Verification code resend, forgot/reset password pass-throughs
- The only writer of the SessionStore
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import ApiError, ErrorKind, ValidationError
from app.core.logging import get_logger
from app.models.user import Role, Session, User
from app.services.api_client import ApiClient
from app.services.session_store import SessionStore
from utils.constants import (
    INVALID_CODE_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    REGISTRATION_FAILED_MESSAGE,
    VERIFICATION_FAILED_MESSAGE,
    VERIFICATION_MESSAGE_MARKERS,
)
from utils.validation_utils import normalize_verification_code, validate_verification_code

logger = get_logger(__name__)


def requires_verification(error: ApiError) -> bool:
    """
    Whether a rejected login means "verify your email first".

    Uses the structured kind when the backend provided a code, and falls back
    to looking for "verify"/"verification" in the message.
    """
    if error.kind is ErrorKind.EMAIL_NOT_VERIFIED:
        return True
    message = (error.message or "").lower()
    return any(marker in message for marker in VERIFICATION_MESSAGE_MARKERS)


def _data_from(body: Dict[str, Any]) -> Dict[str, Any]:
    data = body.get("data") or {}
    if not isinstance(data, dict):
        raise ApiError("Malformed response: data is not an object", kind=ErrorKind.SERVER)
    return data


def _user_from(body: Dict[str, Any]) -> User:
    raw_user = _data_from(body).get("user")
    if not raw_user:
        raise ApiError("Malformed response: missing user", kind=ErrorKind.SERVER)
    try:
        return User.model_validate(raw_user)
    except SchemaValidationError as e:
        raise ApiError("Malformed response: invalid user", kind=ErrorKind.SERVER) from e


class AuthService:
    """
    Auth operations for one visitor.

    Mutating operations (login, register, logout, verify_email) raise
    `is_loading` for their duration and always lower it again.
    """

    def __init__(self, client: ApiClient, store: SessionStore):
        self._client = client
        self._store = store

    @property
    def session(self) -> Session:
        return self._store.session

    @asynccontextmanager
    async def _loading(self):
        self._store.replace(is_loading=True)
        try:
            yield
        finally:
            self._store.replace(is_loading=False)

    def _sign_in(self, body: Dict[str, Any]) -> User:
        user = _user_from(body)
        self._store.replace(user=user)
        token = _data_from(body).get("token")
        if token:
            self._client.set_token(token)
        return user

    async def check_session(self) -> Optional[User]:
        """
        Rehydrates the session from GET /auth/me.

        Never raises: any failure leaves the visitor signed out.
        """
        try:
            body = await self._client.get("/auth/me")
            if body.get("success"):
                user = _user_from(body)
                self._store.replace(user=user)
                logger.info(f"Session restored for {user.role.value} user {user.id}")
                return user
            self._store.replace(user=None)
        except ApiError as e:
            logger.info(f"Visitor not authenticated: {e}")
            self._store.replace(user=None)
        finally:
            self._store.replace(is_loading=False)
        return None

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Signs in with email and password.

        Raises:
            ApiError: With the backend message; kind EMAIL_NOT_VERIFIED when
                the account still has to confirm its email
        """
        async with self._loading():
            try:
                body = await self._client.post("/auth/login", {"email": email, "password": password})
            except ApiError as e:
                if requires_verification(e) and e.kind is not ErrorKind.EMAIL_NOT_VERIFIED:
                    raise ApiError(
                        e.message,
                        kind=ErrorKind.EMAIL_NOT_VERIFIED,
                        status_code=e.status_code,
                        details=e.details
                    ) from e
                raise

            if not body.get("success"):
                raise ApiError(body.get("message") or LOGIN_FAILED_MESSAGE, kind=ErrorKind.UNAUTHORIZED, status_code=401)

            user = self._sign_in(body)
            logger.info(f"Login successful for {user.role.value} user {user.id}")
            return body

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = Role.JOB_SEEKER
    ) -> Dict[str, Any]:
        """
        Creates an account. Does not sign in: the email must be verified first.
        """
        async with self._loading():
            body = await self._client.post("/auth/register", {
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
                "role": role.value,
            })
            if not body.get("success"):
                raise ApiError(body.get("message") or REGISTRATION_FAILED_MESSAGE, kind=ErrorKind.VALIDATION, status_code=400)

            logger.info(f"Registered new {role.value} account, awaiting verification")
            return body

    async def logout(self):
        """
        Signs out. The local session is cleared even if the backend call fails.
        """
        async with self._loading():
            try:
                await self._client.post("/auth/logout")
            except ApiError as e:
                logger.warning(f"Backend logout failed, clearing local session anyway: {e.message}")
            finally:
                self._store.replace(user=None)
                self._client.clear_credentials()
        logger.info("Logged out")

    async def verify_email(self, code: str) -> Dict[str, Any]:
        """
        Submits the 6-digit email verification code.
        On success the backend signs the user in.

        Raises:
            ValidationError: If the code is not exactly 6 digits (nothing is sent)
            ApiError: If the backend rejects the code
        """
        code = normalize_verification_code(code)
        if not validate_verification_code(code):
            raise ValidationError(INVALID_CODE_MESSAGE)

        async with self._loading():
            body = await self._client.post("/auth/verify-email", {"code": code})
            if not body.get("success"):
                raise ApiError(body.get("message") or VERIFICATION_FAILED_MESSAGE, kind=ErrorKind.VALIDATION, status_code=400)

            user = self._sign_in(body)
            logger.info(f"Email verified, user {user.id} signed in")
            return body

    async def resend_verification_code(self, email: str) -> Dict[str, Any]:
        return await self._client.post("/auth/resend-verification", {"email": email})

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        return await self._client.post("/auth/forgot-password", {"email": email})

    async def reset_password(self, code: str, new_password: str) -> Dict[str, Any]:
        return await self._client.post("/auth/reset-password", {"code": code, "newPassword": new_password})

    async def refresh_user(self) -> Optional[User]:
        """
        Re-fetches the current user (picks up a freshly created profile).
        Failures are logged and swallowed.
        """
        try:
            body = await self._client.get("/auth/me")
            if body.get("success"):
                user = _user_from(body)
                self._store.replace(user=user)
                return user
        except ApiError as e:
            logger.error(f"Failed to refresh user data: {e}")
        return self._store.user
