"""
Job service.

CRUD over jobs scoped to the caller's company. A job owned by another
company is reported as not found rather than forbidden.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InternalFailure, NotFound, ValidationFailure
from app.models import Company, Job
from app.schemas.job import JobCreate, JobFilter, JobUpdate


class JobService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger("jobboard.jobs")

    def _company_for(self, user_id: int) -> Company:
        company = self.db.query(Company).filter(Company.user_id == user_id).first()
        if not company:
            self.logger.warning("No company registered for user ID: %s", user_id)
            raise NotFound("Company not found")
        return company

    def _owned_job(self, user_id: int, job_id: int) -> Job:
        job = (
            self.db.query(Job)
            .join(Company, Job.company_id == Company.id)
            .filter(Job.id == job_id, Company.user_id == user_id)
            .first()
        )
        if not job:
            self.logger.warning("Job with ID: %s not found", job_id)
            raise NotFound("Job not found")
        return job

    def create_job(self, user_id: int, data: JobCreate) -> Job:
        """
        Create a job owned by the caller's company.

        Raises:
            NotFound: If the caller has no company record
        """
        self.logger.info("Creating new job entry...")
        company = self._company_for(user_id)

        try:
            job = Job(company_id=company.id, **data.model_dump())
            self.db.add(job)
            self.db.commit()
            self.db.refresh(job)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error creating job")
            raise InternalFailure("Error creating job") from exc

        self.logger.info("Job created with ID: %s", job.id)
        return job

    def update_job(self, user_id: int, job_id: int, data: JobUpdate) -> Job:
        """
        Apply a partial update to a job the caller owns.

        Raises:
            NotFound: If the job doesn't exist or belongs to another company
        """
        self.logger.info("Updating job with ID: %s", job_id)
        job = self._owned_job(user_id, job_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        salary_start = changes.get("salary_start", job.salary_start)
        salary_end = changes.get("salary_end", job.salary_end)
        start_date = changes.get("start_date", job.start_date)
        end_date = changes.get("end_date", job.end_date)
        if salary_start >= salary_end:
            raise ValidationFailure("Salary start must be less than salary end")
        if start_date >= end_date:
            raise ValidationFailure("start_date must be before end_date")

        try:
            for field, value in changes.items():
                setattr(job, field, value)
            self.db.commit()
            self.db.refresh(job)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error updating job")
            raise InternalFailure("Error updating job") from exc

        self.logger.info("Job with ID: %s updated successfully", job_id)
        return job

    def delete_job(self, user_id: int, job_id: int) -> bool:
        """Delete a job the caller owns, together with its applications."""
        self.logger.info("Deleting job with ID: %s", job_id)
        job = self._owned_job(user_id, job_id)

        try:
            self.db.delete(job)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error deleting job")
            raise InternalFailure("Error deleting job") from exc

        self.logger.info("Job with ID: %s deleted successfully", job_id)
        return True

    def get_all_jobs(self, filters: JobFilter) -> list[Job]:
        self.logger.info("Fetching all jobs with filters...")
        query = self.db.query(Job)

        if filters.title:
            query = query.filter(Job.title.icontains(filters.title, autoescape=True))
        if filters.salary_start is not None:
            query = query.filter(Job.salary_start >= filters.salary_start)
        if filters.salary_end is not None:
            query = query.filter(Job.salary_end <= filters.salary_end)
        if filters.start_date is not None:
            query = query.filter(Job.start_date >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(Job.end_date <= filters.end_date)

        return query.order_by(Job.id).all()

    def get_job_by_id(self, job_id: int) -> Job:
        self.logger.info("Fetching job with ID: %s", job_id)
        job = self.db.get(Job, job_id)
        if not job:
            self.logger.warning("Job with ID: %s not found", job_id)
            raise NotFound("Job not found")
        return job
