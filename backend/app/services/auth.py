"""
Authentication service.

Owns the session-token lifecycle: every signup/signin persists one
PersonalToken row holding the issued access/refresh pair. A token is only
honoured while its row exists, refresh replaces the access half in place,
and signout deletes the row.
"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings, settings
from app.core.exceptions import (
    Conflict,
    DuplicateEmail,
    DuplicateName,
    InternalFailure,
    InvalidCredentials,
    InvalidSession,
    Unauthorized,
)
from app.core.security import (
    ACCESS_TOKEN,
    create_access_token,
    create_refresh_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from app.models import Company, PersonalToken, Role, User
from app.schemas.auth import CompanySignupRequest, SigninRequest, SignupRequest
from app.utils.strings import mask_string
from app.utils.time import utcnow


class AuthService:
    def __init__(
        self,
        db: Session,
        config: Settings = settings,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.config = config
        self.logger = logger or logging.getLogger("jobboard.auth")

    # ============== Token Helpers ==============

    def _issue_tokens(self, user: User) -> dict[str, str]:
        return {
            "access_token": create_access_token(user.id, user.role, user.email, self.config),
            "refresh_token": create_refresh_token(user.id, user.email, self.config),
        }

    def _persist_session(self, user: User) -> dict[str, str]:
        token = self._issue_tokens(user)
        self.db.add(
            PersonalToken(
                user_id=user.id,
                access_token=token["access_token"],
                refresh_token=token["refresh_token"],
            )
        )
        return token

    @staticmethod
    def _user_summary(user: User) -> dict:
        return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}

    # ============== Registration ==============

    def _duplicate_error(self, email: str, name: str, company: bool = False) -> Optional[Conflict]:
        """Return the conflict a new account with ``email`` and ``name`` would hit, if any."""
        if self.db.query(User.id).filter(User.email == email).first():
            return DuplicateEmail()

        name_taken = self.db.query(User.id).filter(User.name == name).first()
        if company and not name_taken:
            name_taken = self.db.query(Company.id).filter(Company.name == name).first()
        if name_taken:
            return DuplicateName("Company name already registered") if company else DuplicateName()
        return None

    def _lost_insert_race(self, email: str, name: str, company: bool) -> Exception:
        # A concurrent signup committed the same email/name between check and insert
        self.db.rollback()
        duplicate = self._duplicate_error(email, name, company)
        if duplicate is not None:
            self.logger.warning(
                "Signup failed - %s: %s", duplicate.message.lower(), mask_string(email)
            )
            return duplicate
        self.logger.exception("Signup failed on integrity error for email: %s", mask_string(email))
        return InternalFailure("Failed to create user")

    def signup(self, data: SignupRequest) -> dict:
        masked = mask_string(data.email)
        self.logger.info("Signup attempt for email: %s", masked)

        duplicate = self._duplicate_error(data.email, data.name)
        if duplicate is not None:
            self.logger.warning("Signup failed - %s: %s", duplicate.message.lower(), masked)
            raise duplicate

        password_hash = hash_password(data.password, self.config.BCRYPT_SALT_ROUNDS)

        try:
            user = User(
                email=data.email,
                name=data.name,
                role=Role.JOBSEEKER.value,
                password_hash=password_hash,
            )
            self.db.add(user)
            self.db.flush()
            token = self._persist_session(user)
            self.db.commit()
        except IntegrityError as exc:
            raise self._lost_insert_race(data.email, data.name, False) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Signup failed for email: %s", masked)
            raise InternalFailure("Failed to create user") from exc

        self.logger.info("Signup successful for email: %s", masked)
        return {"user": self._user_summary(user), "token": token}

    def signup_company(self, data: CompanySignupRequest) -> dict:
        masked = mask_string(data.email)
        self.logger.info("Signup company attempt for email: %s", masked)

        duplicate = self._duplicate_error(data.email, data.name, company=True)
        if duplicate is not None:
            self.logger.warning("Signup company failed - %s: %s", duplicate.message.lower(), masked)
            raise duplicate

        password_hash = hash_password(data.password, self.config.BCRYPT_SALT_ROUNDS)

        try:
            user = User(
                email=data.email,
                name=data.name,
                role=Role.COMPANY.value,
                password_hash=password_hash,
            )
            company = Company(
                name=data.name,
                about=data.about,
                address=data.address,
                employees=data.employees,
                phone=data.phone,
                website=data.website,
                user=user,
            )
            self.db.add(company)
            self.db.flush()
            token = self._persist_session(user)
            self.db.commit()
        except IntegrityError as exc:
            raise self._lost_insert_race(data.email, data.name, True) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Signup company failed for email: %s", masked)
            raise InternalFailure("Failed to create company") from exc

        self.logger.info("Signup company successful for email: %s", masked)
        return {
            "company": {
                "id": company.id,
                "name": company.name,
                "about": company.about,
                "address": company.address,
                "employees": company.employees,
                "phone": company.phone,
                "website": company.website,
                "user": self._user_summary(user),
            },
            "token": token,
        }

    # ============== Sessions ==============

    def signin(self, data: SigninRequest) -> dict:
        masked = mask_string(data.email)
        self.logger.info("Signin attempt for email: %s", masked)

        user = self.db.query(User).filter(User.email == data.email).first()
        if not user:
            # Unknown emails cost one bcrypt check, like a wrong password
            verify_password(data.password, dummy_password_hash(self.config.BCRYPT_SALT_ROUNDS))
            self.logger.warning("Signin failed - user not found: %s", masked)
            raise InvalidCredentials()

        if not verify_password(data.password, user.password_hash):
            self.logger.warning("Signin failed - invalid password for email: %s", masked)
            raise InvalidCredentials()

        try:
            token = self._persist_session(user)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Signin failed during token creation for email: %s", masked)
            raise InternalFailure("Failed to create token") from exc

        self.logger.info("Signin successful for email: %s", masked)
        return {"user": self._user_summary(user), "token": token}

    def refresh(self, user_id: int, refresh_token: str) -> dict:
        """
        Mint a new access token for the session holding ``refresh_token``.

        The refresh token itself is returned unchanged.
        """
        self.logger.info("Attempting to refresh token for user ID: %s", user_id)

        session = (
            self.db.query(PersonalToken)
            .filter(
                PersonalToken.user_id == user_id,
                PersonalToken.refresh_token == refresh_token,
            )
            .first()
        )
        if not session:
            self.logger.warning("Refresh token not found or invalid for user ID: %s", user_id)
            raise InvalidSession()

        user = session.user
        try:
            session.access_token = create_access_token(
                user.id, user.role, user.email, self.config
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Failed to refresh token for user ID: %s", user_id)
            raise InternalFailure("Failed to refresh token") from exc

        self.logger.info("Tokens refreshed successfully for user ID: %s", user_id)
        return {
            "token": {
                "access_token": session.access_token,
                "refresh_token": refresh_token,
            }
        }

    def signout(self, user_id: int, access_token: str) -> None:
        """Delete the session row, revoking both its access and refresh tokens."""
        self.logger.info("Attempting signout for user ID: %s", user_id)

        session = (
            self.db.query(PersonalToken)
            .filter(
                PersonalToken.user_id == user_id,
                PersonalToken.access_token == access_token,
            )
            .first()
        )
        if not session:
            self.logger.warning("Signout failed - token not found for user ID: %s", user_id)
            raise InvalidSession()

        try:
            self.db.delete(session)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Signout failed for user ID: %s", user_id)
            raise InternalFailure("Failed to sign out") from exc

        self.logger.info("Signout successful for user ID: %s", user_id)

    def get_current_user(self, user_id: int) -> dict:
        user = self.db.get(User, user_id)
        if not user:
            self.logger.warning("User not found for user ID: %s", user_id)
            raise Unauthorized("Access denied")
        return self._user_summary(user)

    def find_session(self, token: str, token_type: str) -> Optional[PersonalToken]:
        """Return the session row holding ``token`` as its access or refresh half."""
        column = (
            PersonalToken.access_token if token_type == ACCESS_TOKEN else PersonalToken.refresh_token
        )
        return self.db.query(PersonalToken).filter(column == token).first()

    # ============== Scheduled Cleanup ==============

    def sweep_expired_sessions(self) -> int:
        """
        Delete sessions older than the retention window.

        Failures are logged per row and never raised.
        """
        self.logger.info("Running scheduled task: sweep_expired_sessions")
        cutoff = utcnow() - timedelta(days=self.config.TOKEN_RETENTION_DAYS)

        try:
            expired = (
                self.db.query(PersonalToken).filter(PersonalToken.created_at <= cutoff).all()
            )
        except SQLAlchemyError:
            self.db.rollback()
            self.logger.exception("Failed to load expired tokens")
            return 0

        deleted = 0
        for session in expired:
            try:
                self.db.delete(session)
                self.db.commit()
                deleted += 1
            except SQLAlchemyError:
                self.db.rollback()
                self.logger.exception("Failed to delete expired token %s", session.id)

        self.logger.info("Expired tokens deleted: %s", deleted)
        return deleted

