"""
Profile service.

Profile fields, the profile photo and the password of the calling user.
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings, settings
from app.core.exceptions import DuplicateName, InternalFailure, NotFound, ValidationFailure
from app.core.security import hash_password, verify_password
from app.models import Company, User
from app.schemas.profile import PasswordChange, ProfileUpdate
from app.services.storage import ImageStore

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}


class ProfileService:
    def __init__(
        self,
        db: Session,
        image_store: ImageStore,
        config: Settings = settings,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.image_store = image_store
        self.config = config
        self.logger = logger or logging.getLogger("jobboard.profiles")

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            self.logger.warning("User with ID: %s not found", user_id)
            raise NotFound("User not found")
        return user

    def _name_taken(self, user_id: int, name: str) -> bool:
        """True if another user, or another user's company, already uses ``name``."""
        if self.db.query(User.id).filter(User.name == name, User.id != user_id).first():
            return True
        return (
            self.db.query(Company.id)
            .filter(Company.name == name, Company.user_id != user_id)
            .first()
            is not None
        )

    def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        """
        Update name, portfolio and CV links.

        A COMPANY user's company record is renamed along with the user.

        Raises:
            DuplicateName: If another user or company already has the requested name
        """
        self.logger.info("Updating profile for user ID: %s", user_id)
        user = self._get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name and new_name != user.name and self._name_taken(user_id, new_name):
            self.logger.warning("Profile update failed - name already registered: %s", new_name)
            raise DuplicateName()

        try:
            for field, value in changes.items():
                setattr(user, field, value)
            if new_name and user.company is not None:
                user.company.name = new_name
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as exc:
            self.db.rollback()
            if new_name and self._name_taken(user_id, new_name):
                self.logger.warning("Profile update failed - name already registered: %s", new_name)
                raise DuplicateName() from exc
            self.logger.exception("Error updating profile")
            raise InternalFailure("Error updating profile") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error updating profile")
            raise InternalFailure("Error updating profile") from exc

        self.logger.info("Profile updated for user ID: %s", user_id)
        return user

    def validate_photo(self, filename: Optional[str], content_type: Optional[str], size: int) -> None:
        if not filename or Path(filename).suffix.lower() not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationFailure("Only .jpg, .jpeg and .png files are allowed")
        if not content_type or not content_type.startswith("image/"):
            raise ValidationFailure("Uploaded file must be an image")
        if size == 0:
            raise ValidationFailure("Uploaded file is empty")
        if size > self.config.max_upload_size_bytes:
            raise ValidationFailure(
                f"File too large. Maximum size is {self.config.MAX_UPLOAD_SIZE_MB}MB"
            )

    def upload_photo(
        self,
        user_id: int,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
    ) -> User:
        """
        Store a new profile photo and point the user at it.

        The previous photo is removed from the store only after the new URL
        has been committed. That removal is outside the transaction: if it
        fails the old image is orphaned and a warning is logged.
        """
        self.logger.info("Uploading profile photo for user ID: %s", user_id)
        self.validate_photo(filename, content_type, len(content))
        user = self._get_user(user_id)
        previous_url = user.profile

        new_url = self.image_store.upload_image(content, filename)

        try:
            user.profile = new_url
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error saving profile photo")
            self._discard_image(new_url)
            raise InternalFailure("Error saving profile photo") from exc

        if previous_url:
            self._discard_image(previous_url)

        self.logger.info("Profile photo updated for user ID: %s", user_id)
        return user

    def delete_photo(self, user_id: int) -> User:
        """
        Raises:
            NotFound: If the user has no profile photo
        """
        self.logger.info("Deleting profile photo for user ID: %s", user_id)
        user = self._get_user(user_id)
        if not user.profile:
            raise NotFound("Profile photo not found")

        previous_url = user.profile
        try:
            user.profile = None
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error deleting profile photo")
            raise InternalFailure("Error deleting profile photo") from exc

        self._discard_image(previous_url)
        self.logger.info("Profile photo deleted for user ID: %s", user_id)
        return user

    def change_password(self, user_id: int, data: PasswordChange) -> None:
        """
        Replace the password after verifying the current one.

        Raises:
            ValidationFailure: If the current password doesn't match
        """
        self.logger.info("Changing password for user ID: %s", user_id)
        user = self._get_user(user_id)

        if not verify_password(data.current_password, user.password_hash):
            self.logger.warning("Password change failed - wrong current password for user ID: %s", user_id)
            raise ValidationFailure("Current password is incorrect")

        password_hash = hash_password(data.new_password, self.config.BCRYPT_SALT_ROUNDS)
        try:
            user.password_hash = password_hash
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            self.logger.exception("Error changing password")
            raise InternalFailure("Error changing password") from exc

        self.logger.info("Password changed for user ID: %s", user_id)

    def _discard_image(self, url: str) -> None:
        try:
            self.image_store.delete_by_url(url)
        except OSError:
            self.logger.warning("Failed to delete image %s from store", url, exc_info=True)
