"""
Application service.

Applications move PENDING/APPLIED -> ACCEPTED | REJECTED | CANCELLED. The
three outcomes are terminal: nothing transitions out of them.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InternalFailure, InvalidTransition, JobNotFound, NotFound
from app.models import Application, ApplicationStatus, Company, Job, User
from app.models.application import OPEN_STATUSES, is_terminal
from app.schemas.application import ApplicationFilter
from app.utils.time import utcnow


class ApplicationService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger("jobboard.applications")

    def create_application(self, user_id: int, job_id: int) -> Application:
        """
        Apply to a job that hasn't expired yet.

        Raises:
            JobNotFound: If the job doesn't exist or its end date has passed
        """
        self.logger.info("Creating new application entry...")

        job = (
            self.db.query(Job)
            .filter(Job.id == job_id, Job.end_date >= utcnow())
            .first()
        )
        if not job:
            self.logger.warning("Job with ID: %s not found or has expired", job_id)
            raise JobNotFound()

        try:
            application = Application(
                job_id=job.id,
                user_id=user_id,
                status=ApplicationStatus.PENDING.value,
            )
            self.db.add(application)
            self.db.commit()
            self.db.refresh(application)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error creating application")
            raise InternalFailure("Error creating application") from exc

        self.logger.info("Application created with ID: %s", application.id)
        return application

    def update_status(self, company_user_id: int, application_id: int, status: str) -> Application:
        """
        Set the status of an application to a job owned by the caller's company.

        Raises:
            NotFound: If the application doesn't exist or targets another company's job
            InvalidTransition: If the application is already in a terminal state
        """
        self.logger.info("Updating application with ID: %s", application_id)

        application = (
            self.db.query(Application)
            .join(Job, Application.job_id == Job.id)
            .join(Company, Job.company_id == Company.id)
            .filter(Application.id == application_id, Company.user_id == company_user_id)
            .first()
        )
        if not application:
            self.logger.warning("Application with ID: %s not found", application_id)
            raise NotFound("Application not found")

        if is_terminal(application.status):
            self.logger.warning(
                "Application with ID: %s is already %s", application_id, application.status
            )
            raise InvalidTransition()

        try:
            application.status = status
            self.db.commit()
            self.db.refresh(application)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error updating application")
            raise InternalFailure("Error updating application") from exc

        self.logger.info("Application with ID: %s updated successfully", application_id)
        return application

    def cancel_application(self, user_id: int, application_id: int) -> Application:
        """
        Cancel the caller's own application.

        Cancelling an already cancelled application is a no-op; accepted or
        rejected applications can't be cancelled.
        """
        self.logger.info("Cancelling application with ID: %s", application_id)

        application = (
            self.db.query(Application)
            .filter(Application.id == application_id, Application.user_id == user_id)
            .first()
        )
        if not application:
            self.logger.warning("Application with ID: %s not found", application_id)
            raise NotFound("Application not found")

        if application.status == ApplicationStatus.CANCELLED.value:
            return application
        if is_terminal(application.status):
            raise InvalidTransition()

        try:
            application.status = ApplicationStatus.CANCELLED.value
            self.db.commit()
            self.db.refresh(application)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error cancelling application")
            raise InternalFailure("Error cancelling application") from exc

        self.logger.info("Application with ID: %s cancelled", application_id)
        return application

    def get_application_by_id(self, application_id: int) -> Application:
        self.logger.info("Fetching application with ID: %s", application_id)
        application = self.db.get(Application, application_id)
        if not application:
            self.logger.warning("Application with ID: %s not found", application_id)
            raise NotFound("Application not found")
        return application

    def filter_applications(self, filters: ApplicationFilter) -> list[Application]:
        self.logger.info("Fetching applications with filters...")
        query = self.db.query(Application)

        if filters.job_id is not None:
            query = query.filter(Application.job_id == filters.job_id)
        if filters.user_id is not None:
            query = query.filter(Application.user_id == filters.user_id)
        if filters.name:
            query = query.join(User, Application.user_id == User.id).filter(
                User.name.icontains(filters.name, autoescape=True)
            )
        if filters.status is not None:
            query = query.filter(Application.status == filters.status.value)

        return query.order_by(Application.id).all()

    def handle_expired_jobs(self) -> int:
        """
        Cancel the open applications of every job whose end date has passed.

        Runs on a schedule. Each job is committed on its own; a failure is
        logged and the sweep moves on. Returns the number of applications cancelled.
        """
        self.logger.info("Running scheduled task: handle_expired_jobs")

        try:
            expired_job_ids = [
                job_id
                for (job_id,) in self.db.query(Job.id).filter(Job.end_date <= utcnow()).all()
            ]
        except SQLAlchemyError:
            self.db.rollback()
            self.logger.exception("Failed to load expired jobs")
            return 0

        cancelled = 0
        for job_id in expired_job_ids:
            try:
                updated = (
                    self.db.query(Application)
                    .filter(
                        Application.job_id == job_id,
                        Application.status.in_(OPEN_STATUSES),
                    )
                    .update(
                        {
                            Application.status: ApplicationStatus.CANCELLED.value,
                            Application.updated_at: utcnow(),
                        },
                        synchronize_session=False,
                    )
                )
                self.db.commit()
                cancelled += updated
            except SQLAlchemyError:
                self.db.rollback()
                self.logger.exception("Failed to cancel applications for job %s", job_id)

        if cancelled:
            self.logger.info("Cancelled %s applications for expired jobs", cancelled)
        return cancelled
