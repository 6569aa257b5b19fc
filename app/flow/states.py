"""
app/flow/states.py

Purpose: Defines the steps of the signup and login flows

- Enums for each step (ROLE_SELECTION, REGISTER, VERIFY_EMAIL, LOGIN)
- Single source of truth for flow steps
- Step transition validation
- Metadata for each step (display name, progress, back navigation)
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class SignupStep(Enum):
    """
    Steps a new visitor walks through before an account exists and is verified.

    Plain Enum: the signup and login flows both have a "verify-email" step and
    the two must never compare equal.
    """
    ROLE_SELECTION = "role-selection"
    REGISTER = "register"
    VERIFY_EMAIL = "verify-email"


class LoginStep(Enum):
    """
    Steps of the login page. An unverified account detours through
    VERIFY_EMAIL and comes back to LOGIN.
    """
    LOGIN = "login"
    VERIFY_EMAIL = "verify-email"


@dataclass
class StepMetadata:
    """
    Metadata associated with each flow step.
    """
    name: Enum
    display_name: str
    step_number: Optional[int] = None  # For progress tracking
    total_steps: int = 3
    can_go_back: bool = False
    description: str = ""


STEP_METADATA: Dict[Enum, StepMetadata] = {
    SignupStep.ROLE_SELECTION: StepMetadata(
        name=SignupStep.ROLE_SELECTION,
        display_name="Choose your role",
        step_number=1,
        description="Job seeker or employer"
    ),
    SignupStep.REGISTER: StepMetadata(
        name=SignupStep.REGISTER,
        display_name="Create your account",
        step_number=2,
        can_go_back=True,
        description="Email, password and name"
    ),
    SignupStep.VERIFY_EMAIL: StepMetadata(
        name=SignupStep.VERIFY_EMAIL,
        display_name="Verify your email",
        step_number=3,
        can_go_back=True,
        description="6-digit code sent by email"
    ),
    LoginStep.LOGIN: StepMetadata(
        name=LoginStep.LOGIN,
        display_name="Sign in",
        total_steps=1,
        description="Email and password"
    ),
    LoginStep.VERIFY_EMAIL: StepMetadata(
        name=LoginStep.VERIFY_EMAIL,
        display_name="Verify your email",
        total_steps=1,
        can_go_back=True,
        description="Account exists but its email is not verified yet"
    ),
}


# Valid step transitions - prevents skipping steps
STEP_TRANSITIONS: Dict[Enum, List[Enum]] = {
    SignupStep.ROLE_SELECTION: [
        SignupStep.REGISTER,
        SignupStep.ROLE_SELECTION,
    ],
    SignupStep.REGISTER: [
        SignupStep.VERIFY_EMAIL,
        SignupStep.REGISTER,  # Retry on failure
        SignupStep.ROLE_SELECTION,  # Back to role selection
    ],
    SignupStep.VERIFY_EMAIL: [
        SignupStep.VERIFY_EMAIL,  # Retry / resend
        SignupStep.ROLE_SELECTION,  # Start over, or done (draft discarded)
    ],
    LoginStep.LOGIN: [
        LoginStep.LOGIN,
        LoginStep.VERIFY_EMAIL,
    ],
    LoginStep.VERIFY_EMAIL: [
        LoginStep.VERIFY_EMAIL,
        LoginStep.LOGIN,
    ],
}


def is_valid_transition(from_step: Enum, to_step: Enum) -> bool:
    """
    Checks if a step transition is valid.

    Args:
        from_step: Current step
        to_step: Target step

    Returns:
        True if transition is allowed, False otherwise
    """
    allowed_transitions = STEP_TRANSITIONS.get(from_step, [])
    return to_step in allowed_transitions


def get_step_metadata(step: Enum) -> StepMetadata:
    """
    Retrieves metadata for a given step.
    """
    return STEP_METADATA.get(step, StepMetadata(
        name=step,
        display_name=step.value,
        description="Unknown step"
    ))


def get_progress_message(step: Enum) -> str:
    """
    Generates a progress message for the current step (e.g., "Step 2 of 3").
    """
    metadata = get_step_metadata(step)
    if metadata.step_number and metadata.step_number > 0:
        return f"Step {metadata.step_number} of {metadata.total_steps}"
    return ""
