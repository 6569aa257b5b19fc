"""
app/schemas/profile.py

Purpose: Onboarding drafts

- Role-specific profile fields collected on the onboarding page
- Required-field and format validation
- Conversion to the backend's profile-creation payload
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator

from utils.constants import COMPANY_SIZES, DEFAULT_COUNTRY_CODE, INDUSTRIES
from utils.validation_utils import (
    normalize_skills,
    sanitize_input,
    validate_country_code,
    validate_phone_number,
    validate_website,
)


def _required(value: str, label: str) -> str:
    value = sanitize_input(value or "", max_length=5000)
    if not value:
        raise ValueError(f"{label} is required")
    return value


class JobSeekerDraft(BaseModel):
    """Profile fields of a job seeker."""

    full_name: str = Field(default="", alias="fullName", validate_default=True)
    phone: str = Field(default="", validate_default=True)
    country_code: str = Field(default=DEFAULT_COUNTRY_CODE, alias="countryCode")
    location: str = Field(default="", validate_default=True)
    bio: str = Field(default="", validate_default=True)
    experience: str = Field(default="", validate_default=True)
    skills: List[str] = []
    education: str = Field(default="", validate_default=True)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    cv_url: Optional[str] = Field(default=None, alias="cvUrl")

    @validator("full_name")
    def check_full_name(cls, v):
        return _required(v, "Full name")

    @validator("location")
    def check_location(cls, v):
        return _required(v, "Location")

    @validator("bio")
    def check_bio(cls, v):
        return _required(v, "Bio")

    @validator("experience")
    def check_experience(cls, v):
        return _required(v, "Experience")

    @validator("education")
    def check_education(cls, v):
        return _required(v, "Education")

    @validator("phone")
    def check_phone(cls, v):
        if not validate_phone_number(v):
            raise ValueError("A valid phone number is required")
        return v.strip()

    @validator("country_code")
    def check_country_code(cls, v):
        if not validate_country_code(v):
            raise ValueError("Invalid country code")
        return v.strip()

    @validator("skills", pre=True)
    def clean_skills(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        if v is None:
            v = []
        if not isinstance(v, list) or not all(isinstance(skill, str) for skill in v):
            raise ValueError("Skills must be text")
        return normalize_skills(v)

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "fullName": self.full_name,
            "phone": self.phone,
            "countryCode": self.country_code,
            "location": self.location,
            "bio": self.bio,
            "experience": self.experience,
            "skills": list(self.skills),
            "education": self.education,
        }
        if self.image_url:
            payload["imageUrl"] = self.image_url
        if self.cv_url:
            payload["cvUrl"] = self.cv_url
        return payload

    class Config:
        populate_by_name = True


class EmployerDraft(BaseModel):
    """Profile fields of an employer and their company."""

    company_name: str = Field(default="", alias="companyName", validate_default=True)
    title: str = Field(default="", validate_default=True)
    company_size: str = Field(default="", alias="companySize", validate_default=True)
    industry: str = Field(default="", validate_default=True)
    website: Optional[str] = None
    phone: str = Field(default="", validate_default=True)
    country_code: str = Field(default=DEFAULT_COUNTRY_CODE, alias="countryCode")
    location: str = Field(default="", validate_default=True)
    description: str = Field(default="", validate_default=True)
    founded: int = 0
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @validator("company_name")
    def check_company_name(cls, v):
        return _required(v, "Company name")

    @validator("title")
    def check_title(cls, v):
        return _required(v, "Your title")

    @validator("location")
    def check_location(cls, v):
        return _required(v, "Location")

    @validator("description")
    def check_description(cls, v):
        return _required(v, "Company description")

    @validator("industry")
    def check_industry(cls, v):
        v = _required(v, "Industry")
        if v not in INDUSTRIES:
            raise ValueError(f"Unknown industry: {v}")
        return v

    @validator("company_size")
    def check_company_size(cls, v):
        v = _required(v, "Company size")
        if v not in COMPANY_SIZES:
            raise ValueError(f"Unknown company size: {v}")
        return v

    @validator("website")
    def check_website(cls, v):
        if not validate_website(v):
            raise ValueError("Website must start with http:// or https://")
        return v.strip() if v else None

    @validator("phone")
    def check_phone(cls, v):
        if not validate_phone_number(v):
            raise ValueError("A valid phone number is required")
        return v.strip()

    @validator("country_code")
    def check_country_code(cls, v):
        if not validate_country_code(v):
            raise ValueError("Invalid country code")
        return v.strip()

    @validator("founded", pre=True)
    def check_founded(cls, v):
        # An empty or unparsable year means "not given"
        try:
            year = int(v or 0)
        except (TypeError, ValueError):
            year = 0
        if year < 0 or year > datetime.utcnow().year:
            raise ValueError("Invalid founded year")
        return year

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "companyName": self.company_name,
            "title": self.title,
            "companySize": self.company_size,
            "industry": self.industry,
            "website": self.website or "",
            "phone": self.phone,
            "countryCode": self.country_code,
            "location": self.location,
            "description": self.description,
            "founded": self.founded,
        }
        # Employers upload a company logo rather than a portrait
        if self.image_url:
            payload["logoUrl"] = self.image_url
        return payload

    class Config:
        populate_by_name = True
