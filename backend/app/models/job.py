from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.time import utcnow


class Job(Base):
    """
    Job posting owned by a company.

    A job is expired once ``end_date`` has passed; its open applications are
    then cancelled by the expiry sweep.
    """

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), index=True, nullable=False
    )

    title = Column(String(255), index=True, nullable=False)
    description = Column(Text, nullable=False)
    salary_start = Column(Float, nullable=False)
    salary_end = Column(Float, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, index=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    company = relationship("Company", back_populates="jobs")
    applications = relationship(
        "Application", back_populates="job", cascade="all, delete-orphan"
    )
