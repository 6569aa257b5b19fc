"""
app/flow/signup.py

Purpose: Signup and login-verification state machines

Signup:  role-selection -> register -> verify-email -> (redirect to /login)
Login:   login -> verify-email -> login   (unverified accounts only)

- Each action returns a FlowResult describing what the page shows next
- Failures are captured as inline errors; nothing propagates to the page
- Going back or starting over discards everything collected so far
- A result that settles after the draft it belongs to was discarded
  (reset, logout, closed flow) is dropped instead of applied
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from app.core.exceptions import ApiError, EmployMeError
from app.core.logging import get_logger
from app.flow.states import (
    LoginStep,
    SignupStep,
    get_progress_message,
    get_step_metadata,
    is_valid_transition,
)
from app.models.user import Role, Session
from app.services.auth_service import AuthService
from app.services.session_store import SessionStore
from utils.constants import (
    CODE_RESENT_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    LOGIN_PATH,
    REGISTRATION_FAILED_MESSAGE,
    RESEND_FAILED_MESSAGE,
    VERIFICATION_FAILED_MESSAGE,
    VERIFY_BEFORE_LOGIN_MESSAGE,
)
from utils.validation_utils import MIN_PASSWORD_LENGTH, validate_email, validate_password

logger = get_logger(__name__)

SELECTABLE_ROLES = (Role.JOB_SEEKER, Role.EMPLOYER)


@dataclass
class FlowResult:
    """What the page renders after a flow action."""
    step: Enum
    role: Optional[Role] = None
    email: Optional[str] = None
    error: Optional[str] = None
    notice: Optional[str] = None
    redirect: Optional[str] = None

    def to_state(self) -> Dict[str, Any]:
        metadata = get_step_metadata(self.step)
        return {
            "step": self.step.value,
            "title": metadata.display_name,
            "progress": get_progress_message(self.step),
            "canGoBack": metadata.can_go_back,
            "role": self.role.value if self.role else None,
            "email": self.email,
            "error": self.error,
            "notice": self.notice,
        }


class VerificationFlow:
    """
    Plumbing shared by the signup and login flows: the pending-verification
    email, inline messages, the draft generation and the session subscription.
    """

    initial_step: Enum

    def __init__(self, auth: AuthService, store: SessionStore):
        self._auth = auth
        self._generation = 0
        self._closed = False
        self._was_authenticated = store.session.is_authenticated
        self._unsubscribe = store.subscribe(self._on_session_change)
        self._reset()

    def _reset(self):
        self.step = self.initial_step
        self.pending_email: Optional[str] = None
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        # Anything still in flight belongs to the discarded draft
        self._generation += 1

    def _on_session_change(self, session: Session):
        if self._was_authenticated and not session.is_authenticated:
            logger.info("Visitor signed out, discarding flow draft")
            self._reset()
        self._was_authenticated = session.is_authenticated

    def _clear_messages(self):
        self.error = None
        self.notice = None

    def _move(self, to_step: Enum):
        if not is_valid_transition(self.step, to_step):
            raise ValueError(f"Invalid step transition: {self.step.value} -> {to_step.value}")
        logger.info(f"Flow step: {self.step.value} -> {to_step.value}")
        self.step = to_step

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    def _reject(self, action: str) -> FlowResult:
        logger.warning(f"{action} attempted at step {self.step.value}")
        self.error = f"{action} is not available at this step"
        return self.view()

    @property
    def closed(self) -> bool:
        return self._closed

    def view(self) -> FlowResult:
        return FlowResult(
            step=self.step,
            email=self.pending_email,
            error=self.error,
            notice=self.notice,
        )

    async def resend_code(self) -> FlowResult:
        """
        Sends a fresh verification code to the pending email.
        Never changes the step.
        """
        self._clear_messages()
        if not self.pending_email:
            return self._reject("Resending a code")

        generation = self._generation
        try:
            await self._auth.resend_verification_code(self.pending_email)
        except EmployMeError as e:
            if not self._is_stale(generation):
                self.error = e.message or RESEND_FAILED_MESSAGE
            return self.view()

        if not self._is_stale(generation):
            self.notice = CODE_RESENT_MESSAGE
        return self.view()

    def close(self):
        """Ends the flow: pending results are dropped and the subscription released."""
        self._closed = True
        self._generation += 1
        self._unsubscribe()


class SignupFlow(VerificationFlow):
    """role-selection -> register -> verify-email"""

    initial_step = SignupStep.ROLE_SELECTION

    def _reset(self):
        self.role: Optional[Role] = None
        super()._reset()

    def view(self) -> FlowResult:
        result = super().view()
        result.role = self.role
        return result

    def select_role(self, role: Role) -> FlowResult:
        self._clear_messages()
        if self.step is not SignupStep.ROLE_SELECTION:
            return self._reject("Role selection")

        if role not in SELECTABLE_ROLES:
            self.error = "Please choose whether you are looking for a job or hiring"
            return self.view()

        self.role = role
        self._move(SignupStep.REGISTER)
        return self.view()

    async def register(self, email: str, password: str, first_name: str, last_name: str) -> FlowResult:
        self._clear_messages()
        if self.step is not SignupStep.REGISTER or self.role is None:
            return self._reject("Registration")

        if not validate_email(email):
            self.error = "Please enter a valid email address"
            return self.view()
        if not validate_password(password):
            self.error = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            return self.view()

        generation = self._generation
        try:
            await self._auth.register(email, password, first_name, last_name, self.role)
        except EmployMeError as e:
            if not self._is_stale(generation):
                self.error = e.message or REGISTRATION_FAILED_MESSAGE
            return self.view()

        if self._is_stale(generation):
            logger.info("Registration settled after the draft was discarded")
            return self.view()

        self.pending_email = email
        self._move(SignupStep.VERIFY_EMAIL)
        return self.view()

    async def verify(self, code: str) -> FlowResult:
        """
        Submits the verification code. On success the visitor is signed in,
        the draft is discarded and the page is sent to /login.
        """
        self._clear_messages()
        if self.step is not SignupStep.VERIFY_EMAIL:
            return self._reject("Email verification")

        generation = self._generation
        try:
            await self._auth.verify_email(code)
        except EmployMeError as e:
            if not self._is_stale(generation):
                self.error = e.message or VERIFICATION_FAILED_MESSAGE
            return self.view()

        if self._is_stale(generation):
            return self.view()

        self._reset()
        result = self.view()
        result.redirect = LOGIN_PATH
        return result

    def back_to_role_selection(self) -> FlowResult:
        self._reset()
        return self.view()

    start_over = back_to_role_selection


class LoginFlow(VerificationFlow):
    """login -> verify-email -> login"""

    initial_step = LoginStep.LOGIN

    async def login(self, email: str, password: str) -> FlowResult:
        """
        Signs in. An unverified account is sent to the verification step with
        the attempted email instead of seeing an error.
        """
        self._clear_messages()
        if self.step is not LoginStep.LOGIN:
            return self._reject("Login")

        generation = self._generation
        try:
            await self._auth.login(email, password)
        except ApiError as e:
            if self._is_stale(generation):
                return self.view()
            if e.needs_verification:
                self.pending_email = email
                self.notice = VERIFY_BEFORE_LOGIN_MESSAGE
                self._move(LoginStep.VERIFY_EMAIL)
            else:
                self.error = e.message or LOGIN_FAILED_MESSAGE
            return self.view()
        except EmployMeError as e:
            if not self._is_stale(generation):
                self.error = e.message or LOGIN_FAILED_MESSAGE
            return self.view()

        return self.view()

    async def verify(self, code: str) -> FlowResult:
        self._clear_messages()
        if self.step is not LoginStep.VERIFY_EMAIL:
            return self._reject("Email verification")

        generation = self._generation
        try:
            await self._auth.verify_email(code)
        except EmployMeError as e:
            if not self._is_stale(generation):
                self.error = e.message or VERIFICATION_FAILED_MESSAGE
            return self.view()

        if not self._is_stale(generation):
            self._reset()
        return self.view()

    def back_to_login(self) -> FlowResult:
        self._reset()
        return self.view()
