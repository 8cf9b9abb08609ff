from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.base import ORMSchema, RequestSchema, check_password_strength, check_url


class ProfileUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    portfolio: Optional[str] = None
    cv: Optional[str] = None

    @field_validator("portfolio", "cv")
    @classmethod
    def validate_urls(cls, v: Optional[str]) -> Optional[str]:
        return check_url(v) if v is not None else v


class PasswordChange(RequestSchema):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_new_password: str

    @field_validator("new_password", "confirm_new_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChange":
        if self.new_password != self.confirm_new_password:
            raise ValueError("New password and confirm new password must be the same")
        return self


class ProfileOut(ORMSchema):
    id: int
    email: str
    name: str
    role: str
    profile: Optional[str] = None
    portfolio: Optional[str] = None
    cv: Optional[str] = None
