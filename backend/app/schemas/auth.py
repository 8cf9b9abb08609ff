from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.base import (
    ORMSchema,
    RequestSchema,
    check_email,
    check_password_strength,
    check_url,
)


class SignupRequest(RequestSchema):
    """Schema for job seeker registration."""

    name: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-zA-Z\s]*$")
    email: str = Field(..., min_length=5, max_length=100)
    password: str
    password_confirmation: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password", "password_confirmation")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.password_confirmation:
            raise ValueError("Password and password confirmation must match")
        return self


class CompanySignupRequest(SignupRequest):
    """Schema for company registration."""

    about: str = Field(..., min_length=10, max_length=1000)
    phone: str = Field(..., min_length=10, max_length=15, pattern=r"^[0-9]*$")
    address: str = Field(..., min_length=5, max_length=255)
    website: str = Field(..., min_length=5, max_length=255)
    employees: int = Field(..., ge=1, le=500000)

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: str) -> str:
        return check_url(v)


class SigninRequest(RequestSchema):
    """Schema for signin."""

    email: str = Field(..., min_length=5)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email(v)


class UserOut(ORMSchema):
    """Schema for user response (without password)."""

    id: int
    email: str
    name: str
    role: str


class CompanyOut(ORMSchema):
    id: int
    name: str
    about: Optional[str] = None
    address: Optional[str] = None
    employees: Optional[int] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    user: UserOut


class TokenPair(ORMSchema):
    """Schema for an access/refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
