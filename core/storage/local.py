"""
Local file storage gateway.

Files are stored under ``<base_path>/<category>/<uuid><ext>`` and addressed
by the opaque reference ``<category>/<uuid><ext>``. Category rules decide
which content types are accepted.
"""

import uuid
from pathlib import Path, PurePosixPath
from typing import Optional
import logging

from core.config import settings
from core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


# Allowed content-type prefixes per category
CATEGORY_CONTENT_TYPES: dict[str, tuple[str, ...]] = {
    "payments": ("image/", "application/pdf"),
    "resumes": (
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
    "logos": ("image/",),
}


def is_allowed_content_type(content_type: Optional[str], category: str) -> bool:
    """Check a MIME type against the category's allowed prefixes."""
    if not content_type:
        return False
    allowed = CATEGORY_CONTENT_TYPES.get(category, ())
    return any(content_type.startswith(prefix) for prefix in allowed)


class LocalStorage:
    """Local file storage handler."""

    def __init__(self, base_path: Optional[str] = None, max_size: Optional[int] = None):
        """
        Initialize local storage.

        Args:
            base_path: Base directory for file storage
            max_size: Maximum accepted file size in bytes
        """
        self.base_path = Path(base_path or settings.upload_dir).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.max_size = max_size or settings.max_upload_size

    def store(
        self,
        data: bytes,
        category: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Validate and save a file.

        Args:
            data: File contents
            category: Storage category (payments, resumes, logos)
            filename: Original filename, used for the extension only
            content_type: Declared MIME type

        Returns:
            Reference string for the stored file
        """
        if category not in CATEGORY_CONTENT_TYPES:
            raise ValidationError(f"Unknown file category: {category}", field="category")
        if not data:
            raise ValidationError("File is empty", field="file")
        if len(data) > self.max_size:
            raise ValidationError(
                f"File size exceeds {self.max_size // (1024 * 1024)}MB limit", field="file"
            )
        if not is_allowed_content_type(content_type, category):
            raise ValidationError(
                f"Invalid file type for {category}: {content_type}", field="file"
            )

        extension = PurePosixPath(filename).suffix.lower() if filename else ""
        reference = f"{category}/{uuid.uuid4().hex}{extension}"

        file_path = self._resolve(reference)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)

        logger.info(f"Stored {len(data)} bytes as {reference}")
        return reference

    def load(self, reference: str) -> bytes:
        """Read a stored file by reference."""
        file_path = self._resolve(reference)
        if not file_path.is_file():
            raise NotFoundError("File", reference)
        return file_path.read_bytes()

    def exists(self, reference: str) -> bool:
        """Check if a reference points to a stored file."""
        return self._resolve(reference).is_file()

    def delete(self, reference: str) -> bool:
        """
        Delete a stored file.

        Returns:
            True if a file was removed
        """
        file_path = self._resolve(reference)
        if not file_path.is_file():
            return False
        file_path.unlink()
        logger.info(f"Deleted file: {reference}")
        return True

    def _resolve(self, reference: str) -> Path:
        """Map a reference to a path, refusing anything outside the base directory."""
        candidate = (self.base_path / reference).resolve()
        if candidate == self.base_path or self.base_path not in candidate.parents:
            raise ValidationError("Invalid file reference", field="reference")
        return candidate


_storage: Optional[LocalStorage] = None


def get_storage() -> LocalStorage:
    """Get or create the global storage instance."""
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage
