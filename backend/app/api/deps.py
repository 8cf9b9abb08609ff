"""
Request guards and service providers shared by the v1 routers.

A bearer token is accepted only if its signature and expiry check out AND
the PersonalToken row that holds it still exists, so signing out revokes it.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import Forbidden, Unauthorized
from app.core.security import ACCESS_TOKEN, REFRESH_TOKEN, decode_token
from app.db.session import get_db
from app.models import Role
from app.services.applications import ApplicationService
from app.services.auth import AuthService
from app.services.jobs import JobService
from app.services.profiles import ProfileService
from app.services.storage import ImageStore

logger = logging.getLogger("jobboard.auth")

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[Session, Depends(get_db)]
Credentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


# ============== Authentication ==============


def _authenticate(
    credentials: Optional[HTTPAuthorizationCredentials],
    token_type: str,
    db: Session,
    config: Settings,
) -> dict:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access denied")

    token = credentials.credentials
    payload = decode_token(token, token_type, config)
    if payload is None:
        logger.warning("Rejected %s token: invalid signature, expiry or type", token_type)
        raise Unauthorized("Access denied")

    if AuthService(db, config).find_session(token, token_type) is None:
        logger.warning("Rejected %s token: session revoked for user ID: %s", token_type, payload["sub"])
        raise Unauthorized("Access denied")

    return {
        "sub": int(payload["sub"]),
        "role": payload.get("role"),
        "email": payload.get("email"),
        "token_type": token_type,
        "token": token,
    }


def get_current_claims(
    credentials: Credentials,
    db: DbSession,
    config: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Authenticate the access token in the Authorization header."""
    return _authenticate(credentials, ACCESS_TOKEN, db, config)


def get_refresh_claims(
    credentials: Credentials,
    db: DbSession,
    config: Annotated[Settings, Depends(get_settings)],
) -> dict:
    """Authenticate the refresh token in the Authorization header."""
    return _authenticate(credentials, REFRESH_TOKEN, db, config)


CurrentClaims = Annotated[dict, Depends(get_current_claims)]
RefreshClaims = Annotated[dict, Depends(get_refresh_claims)]


# ============== Authorization ==============


class RoleGuard:
    """Dependency allowing only the given roles through; an empty set allows everyone."""

    def __init__(self, *roles: Role):
        self.roles = {role.value for role in roles}

    def __call__(self, claims: CurrentClaims) -> dict:
        if self.roles and claims["role"] not in self.roles:
            logger.warning(
                "Access denied for user ID: %s with role %s", claims["sub"], claims["role"]
            )
            raise Forbidden("Access denied")
        return claims


def require_roles(*roles: Role) -> RoleGuard:
    return RoleGuard(*roles)


CompanyClaims = Annotated[dict, Depends(require_roles(Role.COMPANY))]
JobseekerClaims = Annotated[dict, Depends(require_roles(Role.JOBSEEKER))]


# ============== Services ==============


def get_auth_service(
    db: DbSession, config: Annotated[Settings, Depends(get_settings)]
) -> AuthService:
    return AuthService(db, config)


def get_job_service(db: DbSession) -> JobService:
    return JobService(db)


def get_application_service(db: DbSession) -> ApplicationService:
    return ApplicationService(db)


def get_profile_service(
    db: DbSession,
    image_store: Annotated[ImageStore, Depends(get_image_store)],
    config: Annotated[Settings, Depends(get_settings)],
) -> ProfileService:
    return ProfileService(db, image_store, config)
