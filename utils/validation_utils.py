"""
utils/validation_utils.py

Purpose: Input validation

- Email verification code normalization (6 digits)
- Email and password sanity checks before calling the backend
- Phone number and website checks for onboarding drafts
- Skill list normalization
"""

import re
from typing import Iterable, List, Optional

VERIFICATION_CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 6


def normalize_verification_code(code: Optional[str]) -> str:
    """
    Normalizes a verification code: spaces, dashes and other non-digits are
    dropped. Overlong codes are kept as-is so that the 6-digit check rejects them.

    Args:
        code: Raw code typed by the visitor

    Returns:
        Digits-only code
    """
    if not code:
        return ""
    return re.sub(r"\D", "", code)


def validate_verification_code(code: str) -> bool:
    """
    Validates a verification code (must be exactly 6 digits).

    Args:
        code: Normalized code

    Returns:
        True if valid 6-digit code
    """
    if not code:
        return False

    return bool(re.fullmatch(rf"\d{{{VERIFICATION_CODE_LENGTH}}}", code))


def validate_email(email: Optional[str]) -> bool:
    """
    Loose email check; the backend has the final word.
    """
    if not email:
        return False
    return bool(re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email.strip()))


def validate_password(password: Optional[str]) -> bool:
    """Passwords must be at least 6 characters long."""
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def validate_phone_number(phone: str) -> bool:
    """
    Validates a local phone number (country code is collected separately).

    Args:
        phone: Phone number string

    Returns:
        True if 6 to 15 digits remain after removing separators
    """
    if not phone:
        return False

    # Remove common separators and spaces
    digits = re.sub(r"[\s\-\(\)\.]", "", phone)
    return bool(re.fullmatch(r"\d{6,15}", digits))


def validate_country_code(country_code: str) -> bool:
    if not country_code:
        return False
    return bool(re.fullmatch(r"\+\d{1,4}", country_code.strip()))


def validate_website(website: Optional[str]) -> bool:
    """Websites are optional; when given they must be http(s) URLs."""
    if not website:
        return True
    return bool(re.match(r"^https?://[^\s/$.?#].[^\s]*$", website.strip(), re.IGNORECASE))


def normalize_skills(skills: Iterable[str]) -> List[str]:
    """
    Trims skills and drops blanks and duplicates, keeping first-seen order.
    """
    normalized = []
    for skill in skills or []:
        skill = (skill or "").strip()
        if skill and skill not in normalized:
            normalized.append(skill)
    return normalized


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Trims and collapses whitespace in free text fields.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]
    text = " ".join(text.split())

    return text.strip()
