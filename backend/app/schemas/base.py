"""Shared schema building blocks."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from app.utils.strings import is_valid_email, sanitize_input

PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()"
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


class RequestSchema(BaseModel):
    """Base for request bodies and query filters: strings are trimmed before validation."""

    @model_validator(mode="before")
    @classmethod
    def sanitize(cls, data: Any) -> Any:
        return sanitize_input(data)


class ORMSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def check_password_strength(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(value) > 32:
        raise ValueError("Password can be at most 32 characters")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least one number")
    if not any(char in PASSWORD_SPECIAL_CHARACTERS for char in value):
        raise ValueError("Password must contain at least one special character")
    return value


def check_email(value: str) -> str:
    if not is_valid_email(value):
        raise ValueError("Invalid email format")
    return value.lower()


def check_url(value: str) -> str:
    if not URL_PATTERN.match(value):
        raise ValueError("Invalid URL format")
    return value
