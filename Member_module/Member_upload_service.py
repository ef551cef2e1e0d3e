"""
Local disk storage for member photos and party logos.
Files live under UPLOAD_DIR/members and are referenced from the member record
by a relative URL under UPLOAD_URL_PREFIX, which the app serves statically.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

# Allowed image file extensions
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class MemberImageStorageService:
    """Service for storing member images on local disk"""

    def __init__(self, upload_dir: str, url_prefix: str, max_file_size: int):
        self.base_dir = Path(upload_dir) / "members"
        self.url_prefix = f"{url_prefix.rstrip('/')}/members"
        self.max_file_size = max_file_size
        logger.info(f"MemberImageStorageService initialized at: {self.base_dir}")

    def save_image(self, filename: Optional[str], file_content: bytes, kind: str = "image") -> Optional[str]:
        """
        Store an uploaded image and return its relative URL.

        Problems with the attachment are not fatal to the member mutation:
        the file is skipped, a warning is logged and None is returned.

        Args:
            filename: Original filename (used only for its extension)
            file_content: File content as bytes
            kind: Label used in log messages ("image" or "party logo")

        Returns:
            Relative URL such as "/uploads/members/<uuid>.png", or None
        """
        file_ext = Path(filename).suffix.lower() if filename else ""
        if file_ext not in ALLOWED_EXTENSIONS:
            logger.warning(
                f"Skipping {kind} '{filename}': unsupported file type. "
                f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )
            return None

        if not file_content:
            logger.warning(f"Skipping {kind} '{filename}': file is empty")
            return None

        if len(file_content) > self.max_file_size:
            logger.warning(
                f"Skipping {kind} '{filename}': exceeds maximum size of "
                f"{self.max_file_size // (1024 * 1024)}MB"
            )
            return None

        stored_name = f"{uuid.uuid4().hex}{file_ext}"
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            (self.base_dir / stored_name).write_bytes(file_content)
        except OSError as e:
            logger.warning(f"Skipping {kind} '{filename}': could not be written: {e}", exc_info=True)
            return None

        logger.info(f"Stored member {kind}: {stored_name}")
        return f"{self.url_prefix}/{stored_name}"

    def delete_image(self, image_url: Optional[str]) -> bool:
        """
        Delete a previously stored image.

        Returns:
            True if a local file was removed, False for empty, external or missing references
        """
        path = self.resolve_local_path(image_url)
        if path is None:
            return False

        try:
            path.unlink()
            logger.info(f"Deleted member image: {path.name}")
            return True
        except FileNotFoundError:
            logger.warning(f"Member image not found on disk: {path}")
            return False
        except OSError as e:
            # Don't raise - log error but return False
            logger.error(f"Error deleting member image {path}: {e}", exc_info=True)
            return False

    def resolve_local_path(self, image_url: Optional[str]) -> Optional[Path]:
        """Map a relative URL produced by save_image back to its file, or None."""
        if not image_url or not image_url.startswith(self.url_prefix + "/"):
            return None

        name = image_url[len(self.url_prefix) + 1:]
        # Only flat names produced by save_image are accepted
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return None
        return self.base_dir / name


# Create singleton instance
_member_image_storage_service = None


def get_member_image_storage_service() -> MemberImageStorageService:
    """Get singleton instance of MemberImageStorageService"""
    global _member_image_storage_service
    if _member_image_storage_service is None:
        _member_image_storage_service = MemberImageStorageService(
            upload_dir=settings.UPLOAD_DIR,
            url_prefix=settings.UPLOAD_URL_PREFIX,
            max_file_size=settings.MAX_UPLOAD_SIZE
        )
    return _member_image_storage_service
