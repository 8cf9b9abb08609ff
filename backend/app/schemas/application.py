from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from app.models.application import ApplicationStatus
from app.schemas.base import ORMSchema, RequestSchema


class ApplicationCreate(RequestSchema):
    job_id: int = Field(..., ge=1)


class ApplicationUpdate(RequestSchema):
    status: Literal["APPLIED", "ACCEPTED", "REJECTED"]


class ApplicationFilter(RequestSchema):
    """Query filters for listing applications."""

    job_id: Optional[int] = Field(default=None, ge=1)
    user_id: Optional[int] = Field(default=None, ge=1)
    name: Optional[str] = Field(default=None, max_length=255)
    status: Optional[ApplicationStatus] = None


class ApplicationOut(ORMSchema):
    id: int
    job_id: int
    user_id: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
