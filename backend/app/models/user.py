import enum

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.time import utcnow


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    COMPANY = "COMPANY"
    JOBSEEKER = "JOBSEEKER"


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.JOBSEEKER.value)  # ADMIN | COMPANY | JOBSEEKER

    # Profile
    profile = Column(String, nullable=True)  # Photo URL in the image store
    portfolio = Column(String, nullable=True)
    cv = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    company = relationship(
        "Company", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    tokens = relationship(
        "PersonalToken", back_populates="user", cascade="all, delete-orphan"
    )
    applications = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )
