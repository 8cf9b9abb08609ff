"""
Job Board Database Seeder

Creates demo accounts for local development:
- One company (Acme Labs) with an open job and an expired job
- Two job seekers, each with an application
"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.core.security import hash_password
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import Application, ApplicationStatus, Company, Job, Role, User
from app.utils.time import utcnow

logger = logging.getLogger("jobboard.seed")

DEMO_PASSWORD = "Password1!"
COMPANY_EMAIL = "hr@acmelabs.com"


def seed_database(db: Session) -> bool:
    """Seed the database with demo data. Returns False if it was already seeded."""
    if db.query(User).filter(User.email == COMPANY_EMAIL).first():
        logger.info("Database already seeded. Skipping...")
        return False

    logger.info("Seeding database...")
    password_hash = hash_password(DEMO_PASSWORD, settings.BCRYPT_SALT_ROUNDS)
    now = utcnow()

    try:
        # 1. Company account and its company record
        company_user = User(
            email=COMPANY_EMAIL,
            name="Acme Labs",
            role=Role.COMPANY.value,
            password_hash=password_hash,
        )
        company = Company(
            name="Acme Labs",
            about="Acme Labs builds developer tooling for data teams.",
            address="221 Market Street, San Francisco",
            employees=120,
            phone="4155550100",
            website="https://acmelabs.example.com",
            user=company_user,
        )
        db.add(company)

        # 2. Job seekers
        alice = User(
            email="alice@example.com",
            name="Alice Moreno",
            role=Role.JOBSEEKER.value,
            password_hash=password_hash,
            portfolio="https://alice.example.com",
        )
        bob = User(
            email="bob@example.com",
            name="Bob Tanaka",
            role=Role.JOBSEEKER.value,
            password_hash=password_hash,
        )
        db.add_all([alice, bob])
        db.flush()

        # 3. One open job and one that has already closed
        open_job = Job(
            company_id=company.id,
            title="Backend Engineer",
            description="Build and operate the Python services behind our API.",
            salary_start=90000,
            salary_end=130000,
            start_date=now - timedelta(days=3),
            end_date=now + timedelta(days=30),
        )
        closed_job = Job(
            company_id=company.id,
            title="Data Analyst Intern",
            description="Summer internship on the analytics team.",
            salary_start=20000,
            salary_end=30000,
            start_date=now - timedelta(days=60),
            end_date=now - timedelta(days=1),
        )
        db.add_all([open_job, closed_job])
        db.flush()

        # 4. Applications
        db.add_all(
            [
                Application(
                    user_id=alice.id,
                    job_id=open_job.id,
                    status=ApplicationStatus.APPLIED.value,
                ),
                Application(
                    user_id=bob.id,
                    job_id=closed_job.id,
                    status=ApplicationStatus.CANCELLED.value,
                ),
            ]
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise

    logger.info("Seeded company %s and 2 job seekers (password: %s)", COMPANY_EMAIL, DEMO_PASSWORD)
    return True


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_database(session)
