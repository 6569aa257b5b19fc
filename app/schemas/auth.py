"""
app/schemas/auth.py

Purpose: Request bodies for the login, signup and password endpoints

- Field names follow the Employ.me wire format (camelCase) and also accept
  snake_case
"""

from pydantic import BaseModel, Field

from app.models.user import Role


class LoginRequest(BaseModel):
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")

    class Config:
        json_schema_extra = {
            "example": {"email": "ama@example.com", "password": "s3cret!"}
        }


class RoleSelectionRequest(BaseModel):
    role: Role = Field(..., description="JOB_SEEKER or EMPLOYER")


class RegisterRequest(BaseModel):
    email: str
    password: str
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "email": "ama@example.com",
                "password": "s3cret!",
                "firstName": "Ama",
                "lastName": "Mensah"
            }
        }


class VerifyEmailRequest(BaseModel):
    code: str = Field(..., description="6-digit code from the verification email")


class EmailRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    code: str
    new_password: str = Field(..., alias="newPassword")

    class Config:
        populate_by_name = True
