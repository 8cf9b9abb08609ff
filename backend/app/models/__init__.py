from app.models.user import User, Role
from app.models.company import Company
from app.models.job import Job
from app.models.application import Application, ApplicationStatus
from app.models.token import PersonalToken

__all__ = ["User", "Role", "Company", "Job", "Application", "ApplicationStatus", "PersonalToken"]
