import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.time import utcnow


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


OPEN_STATUSES = frozenset({ApplicationStatus.PENDING.value, ApplicationStatus.APPLIED.value})
TERMINAL_STATUSES = frozenset(
    {
        ApplicationStatus.ACCEPTED.value,
        ApplicationStatus.REJECTED.value,
        ApplicationStatus.CANCELLED.value,
    }
)


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


class Application(Base):
    """A job seeker's application to a job."""

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    job_id = Column(
        Integer, ForeignKey("jobs.id", ondelete="CASCADE"), index=True, nullable=False
    )

    # PENDING | APPLIED | ACCEPTED | REJECTED | CANCELLED
    status = Column(String, index=True, nullable=False, default=ApplicationStatus.PENDING.value)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")
