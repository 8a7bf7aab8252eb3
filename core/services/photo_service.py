# =============================================================================
# core/services/photo_service.py - Bootcamp Photo Storage
# =============================================================================
# Validates and writes uploaded bootcamp photos to the upload directory.
# Files are named photo_<bootcamp_id><ext>, so a new upload replaces the old one.
# =============================================================================

import logging
from pathlib import Path

from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoFileUploadedError,
    StorageUploadError,
)

logger = logging.getLogger(__name__)


class PhotoService:
    """
    Service for photo uploads on local disk.

    Example:
        photos = PhotoService("./public/uploads")
        PhotoService.validate("logo.png", "image/png", len(content), max_bytes=1_000_000)
        filename = photos.save("5d713995b721c3bb38c1f5d0", "logo.png", content)
    """

    def __init__(self, upload_dir: str | Path):
        self.upload_dir = Path(upload_dir)

    @staticmethod
    def validate(
        filename: str | None,
        content_type: str | None,
        size_bytes: int,
        max_bytes: int,
    ) -> None:
        """
        Reject uploads that are missing, not images, or too large.

        Raises:
            NoFileUploadedError: If there is no file or it is empty
            InvalidFileTypeError: If the content type is not image/*
            FileTooLargeError: If size_bytes > max_bytes
        """
        if not filename or size_bytes == 0:
            raise NoFileUploadedError()

        if not content_type or not content_type.startswith("image"):
            raise InvalidFileTypeError(filename, content_type)

        if size_bytes > max_bytes:
            raise FileTooLargeError(size_bytes, max_bytes)

    @staticmethod
    def photo_filename(bootcamp_id: str, original_filename: str) -> str:
        """photo_<bootcamp_id> + the original extension ("logo.PNG" -> ".png")."""
        return f"photo_{bootcamp_id}{Path(original_filename).suffix.lower()}"

    def save(self, bootcamp_id: str, original_filename: str, content: bytes) -> str:
        """
        Write the photo and return its stored filename.

        Raises:
            StorageUploadError: If the file cannot be written
        """
        filename = self.photo_filename(bootcamp_id, original_filename)
        path = self.upload_dir / filename

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write photo {path}: {e}")
            raise StorageUploadError(str(e)) from e

        logger.info(f"Stored photo: {path} ({len(content)} bytes)")
        return filename
