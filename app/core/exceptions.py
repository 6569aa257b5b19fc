from enum import Enum
from typing import Optional, Any


class ErrorKind(str, Enum):
    """
    Classification of a failed backend exchange.
    Callers branch on the kind, never on the message text.
    """
    NETWORK = "NETWORK"
    VALIDATION = "VALIDATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    CONFLICT = "CONFLICT"
    SERVER = "SERVER"


class EmployMeError(Exception):
    """
    Base exception for the Employ.me gateway.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(EmployMeError):
    """
    Raised when input validation fails before anything is sent to the backend.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class ApiError(EmployMeError):
    """
    Raised when the Employ.me backend rejects a request or cannot be reached.

    `message` is the server-supplied message, surfaced to the visitor verbatim.
    """
    def __init__(
        self,
        message: str = "An error occurred",
        kind: ErrorKind = ErrorKind.SERVER,
        status_code: int = 502,
        details: Optional[Any] = None
    ):
        self.kind = kind
        super().__init__(message, code=kind.value, status_code=status_code, details=details)

    @property
    def needs_verification(self) -> bool:
        return self.kind is ErrorKind.EMAIL_NOT_VERIFIED
