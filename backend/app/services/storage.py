"""
Image storage for profile photos.

The database only keeps the URL returned by the store.
"""

import logging
from pathlib import Path

from app.core.config import Settings
from app.core.security import generate_random_token

logger = logging.getLogger("jobboard.storage")


class ImageStore:
    """Interface for the external image store."""

    def upload_image(self, content: bytes, filename: str) -> str:
        raise NotImplementedError

    def delete_by_url(self, url: str) -> None:
        raise NotImplementedError


class LocalImageStore(ImageStore):
    """Writes images under ``upload_dir`` and serves them from ``url_prefix``."""

    def __init__(self, upload_dir: str, url_prefix: str):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def upload_image(self, content: bytes, filename: str) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        suffix = Path(filename).suffix.lower()
        stored_name = f"{generate_random_token(16)}{suffix}"
        (self.upload_dir / stored_name).write_bytes(content)
        logger.info("Stored image %s (%s bytes)", stored_name, len(content))
        return f"{self.url_prefix}/{stored_name}"

    def delete_by_url(self, url: str) -> None:
        # Only the last path segment is trusted, so a URL can't escape upload_dir
        stored_name = url.rstrip("/").split("/")[-1]
        path = self.upload_dir / stored_name
        if path.is_file():
            path.unlink()
            logger.info("Deleted image %s", stored_name)
        else:
            logger.warning("Image %s not found in store", stored_name)


def build_image_store(config: Settings) -> ImageStore:
    if config.STORAGE_DRIVER == "local":
        return LocalImageStore(config.UPLOAD_DIR, config.UPLOAD_URL_PREFIX)
    raise ValueError(f"Unsupported storage driver: {config.STORAGE_DRIVER}")
