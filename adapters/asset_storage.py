"""Local filesystem storage for uploaded meal photos.

Files are written to a single directory and exposed read-only under a public
URL prefix (the prefix is mounted as a static directory by the API layer).
The store does not track which meal owns a file; the meal service deletes a
photo when its meal is deleted or the photo is replaced.
"""

import logging
import os
import random
import re
import time
from pathlib import Path
from typing import Optional

from app.exceptions import ServiceValidationError, StorageIOError

logger = logging.getLogger("menuboard.assets")

# Maximum file size: 5MB
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
_NAME_ATTEMPTS = 5


def generate_unique_filename(original_filename: str) -> str:
    """Timestamp plus random suffix, keeping the original extension.

    Produces names like ``1718000000000-123456789.jpg``. Extensions that are
    not plain alphanumerics are dropped.
    """
    ext = os.path.splitext(original_filename or "")[1]
    if not _SAFE_EXTENSION.match(ext):
        ext = ""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return unique_suffix + ext.lower()


class LocalAssetStore:
    """Photo store backed by a directory on disk."""

    def __init__(
        self,
        directory: Path,
        url_prefix: str = "/uploads",
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        self.directory = Path(directory)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        """Create the upload directory if it doesn't exist"""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(
                f"Cannot create upload directory {self.directory}: {exc}"
            ) from exc

    def validate(self, content: bytes, mime_type: Optional[str]) -> None:
        """
        Check an upload against the store's rules.

        Raises:
            ServiceValidationError: If the file is not an image or exceeds the ceiling
        """
        if not mime_type or not mime_type.lower().startswith("image/"):
            raise ServiceValidationError(
                "Only image files are allowed",
                details={"content_type": mime_type},
                code="INVALID_FILE_TYPE",
            )
        if len(content) > self.max_bytes:
            max_mb = self.max_bytes / 1024 / 1024
            raise ServiceValidationError(
                f"File too large. Maximum size: {max_mb:g}MB",
                details={"size": len(content), "max": self.max_bytes},
                code="FILE_TOO_LARGE",
            )

    def store(self, content: bytes, original_filename: str, mime_type: Optional[str]) -> str:
        """
        Persist an uploaded photo under a fresh unique name.

        Args:
            content: Raw file bytes
            original_filename: Client-side filename, only its extension is kept
            mime_type: Content type reported by the client

        Returns:
            Public reference, e.g. ``/uploads/1718000000000-42.png``

        Raises:
            ServiceValidationError: If the upload is rejected
            StorageIOError: If the file cannot be written
        """
        self.validate(content, mime_type)
        self.ensure_directory()

        for _ in range(_NAME_ATTEMPTS):
            filename = generate_unique_filename(original_filename)
            path = self.directory / filename
            try:
                # "xb" fails instead of overwriting another meal's photo
                with open(path, "xb") as fh:
                    fh.write(content)
            except FileExistsError:
                logger.debug("Asset name collision on %s, retrying", filename)
                continue
            except OSError as exc:
                raise StorageIOError(f"Failed to write asset {path}: {exc}") from exc

            ref = f"{self.url_prefix}/{filename}"
            logger.info("Stored asset %s (%d bytes)", ref, len(content))
            return ref

        raise StorageIOError(
            f"Could not allocate a unique asset name after {_NAME_ATTEMPTS} attempts"
        )

    def path_for(self, ref: Optional[str]) -> Optional[Path]:
        """Map a public reference back to a file inside the store, or None
        when the reference does not belong to this store."""
        if not ref or not ref.startswith(self.url_prefix + "/"):
            return None
        filename = ref[len(self.url_prefix) + 1 :]
        if not filename or filename != os.path.basename(filename) or filename in (".", ".."):
            return None
        return self.directory / filename

    def exists(self, ref: Optional[str]) -> bool:
        path = self.path_for(ref)
        return path is not None and path.is_file()

    def delete(self, ref: Optional[str]) -> bool:
        """
        Remove a stored photo. Idempotent.

        Returns:
            True if a file was deleted, False if there was nothing to delete

        Raises:
            StorageIOError: For failures other than the file being absent
        """
        path = self.path_for(ref)
        if path is None:
            if ref:
                logger.warning("Ignoring delete of foreign asset reference %r", ref)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("Asset %s already gone", ref)
            return False
        except OSError as exc:
            raise StorageIOError(f"Failed to delete asset {path}: {exc}") from exc
        logger.info("Deleted asset %s", ref)
        return True
