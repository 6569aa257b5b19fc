"""
app/models/user.py

Purpose: User and session models

- Role of an Employ.me account
- Authenticated user as returned by the backend (camelCase wire format)
- Immutable session snapshot held by the session store
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, validator


class Role(str, Enum):
    """Account roles. A role never changes after registration."""

    JOB_SEEKER = "JOB_SEEKER"
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """
    The authenticated user.

    `has_profile` is computed by the backend (a role-specific profile record
    exists) and is never inferred locally.
    """
    id: str
    email: str
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    role: Role
    is_verified: bool = Field(default=False, alias="isVerified")
    has_profile: bool = Field(default=False, alias="hasProfile")
    profile: Optional[Dict[str, Any]] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @validator("id", pre=True)
    def coerce_id(cls, v):
        return str(v) if v is not None else v

    @validator("first_name", "last_name", pre=True)
    def blank_names(cls, v):
        return v or ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def summary(self) -> Dict[str, Any]:
        """Public view of the user embedded in page responses."""
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "isVerified": self.is_verified,
            "hasProfile": self.has_profile,
            "imageUrl": self.image_url,
        }

    class Config:
        populate_by_name = True
        frozen = True
        extra = "ignore"


@dataclass(frozen=True)
class Session:
    """
    Snapshot of "who is logged in".
    Replaced, never mutated: every change produces a new Session.
    """
    user: Optional[User] = None
    is_loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
