from app.services.applications import ApplicationService
from app.services.auth import AuthService
from app.services.jobs import JobService
from app.services.profiles import ProfileService
from app.services.storage import ImageStore, LocalImageStore, build_image_store

__all__ = [
    "ApplicationService",
    "AuthService",
    "JobService",
    "ProfileService",
    "ImageStore",
    "LocalImageStore",
    "build_image_store",
]
