from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.base import ORMSchema, RequestSchema
from app.utils.time import to_naive_utc


class JobCreate(RequestSchema):
    """Schema for creating a job."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    salary_start: float = Field(..., ge=0)
    salary_end: float = Field(..., ge=0)
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def validate_ranges(self) -> "JobCreate":
        if self.salary_start >= self.salary_end:
            raise ValueError("Salary start must be less than salary end")
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


class JobUpdate(RequestSchema):
    """Schema for a partial job update; rules apply to whichever fields are present."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    salary_start: Optional[float] = Field(default=None, ge=0)
    salary_end: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v

    @model_validator(mode="after")
    def validate_ranges(self) -> "JobUpdate":
        if self.salary_start is not None and self.salary_end is not None:
            if self.salary_start >= self.salary_end:
                raise ValueError("Salary start must be less than salary end")
        if self.start_date is not None and self.end_date is not None:
            if self.start_date >= self.end_date:
                raise ValueError("start_date must be before end_date")
        return self


class JobFilter(RequestSchema):
    """Query filters for listing jobs; absent filters leave that field unconstrained."""

    title: Optional[str] = Field(default=None, max_length=255)
    salary_start: Optional[float] = Field(default=None, ge=0)
    salary_end: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v


class JobOut(ORMSchema):
    id: int
    company_id: int
    title: str
    description: str
    salary_start: float
    salary_end: float
    start_date: datetime
    end_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
