"""
Receipt image storage.

Receipts are written below UPLOAD_DIR/receipts under a random name so the
public URL reveals nothing about the payer. A receipt first lands in a
temporary file in the same directory and is then moved into place with
os.replace, so a reader never sees a partially written image.
"""

import os
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path

import structlog

from roomierules.core.exceptions import ValidationException

logger = structlog.get_logger(__name__)

RECEIPTS_SUBDIR = "receipts"
PUBLIC_PREFIX = "/uploads"

# Content types accepted for receipts, mapped to the extension used when the
# uploaded filename has none
ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}


@dataclass(frozen=True)
class StoredReceipt:
    path: Path
    url: str


class ReceiptStorage:
    """
    Stores receipt images on the local filesystem.

    Args:
        upload_dir: Root of the public upload directory
        max_size: Largest accepted image in bytes
    """

    def __init__(self, upload_dir: str | Path, max_size: int):
        self.upload_dir = Path(upload_dir)
        self.receipts_dir = self.upload_dir / RECEIPTS_SUBDIR
        self.max_size = max_size

    def validate(self, content_type: str | None, size: int) -> None:
        """
        Check an upload before anything touches the disk.

        Raises:
            ValidationException: Wrong content type, empty or oversized file
        """
        if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
            raise ValidationException("Only image files (JPEG, PNG, WebP) are allowed")
        if size == 0:
            raise ValidationException("Receipt file is empty")
        if size > self.max_size:
            limit_mb = self.max_size // (1024 * 1024)
            raise ValidationException(f"File size must be less than {limit_mb}MB")

    def _extension(self, filename: str | None, content_type: str) -> str:
        suffix = Path(filename or "").suffix.lstrip(".").lower()
        if suffix in ALLOWED_EXTENSIONS:
            return suffix
        return ALLOWED_CONTENT_TYPES[content_type.lower()]

    def save(self, data: bytes, filename: str | None, content_type: str) -> StoredReceipt:
        """
        Write a receipt atomically and return where it can be fetched.

        Raises:
            OSError: If the directory cannot be created or the write fails.
                The temporary file is removed in that case.
        """
        self.receipts_dir.mkdir(parents=True, exist_ok=True)
        name = f"{uuid.uuid4().hex}.{self._extension(filename, content_type)}"
        target = self.receipts_dir / name

        fd, tmp_path = tempfile.mkstemp(dir=self.receipts_dir, prefix=".upload-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, target)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug("receipt_stored", path=str(target), size=len(data))
        return StoredReceipt(path=target, url=f"{PUBLIC_PREFIX}/{RECEIPTS_SUBDIR}/{name}")

    def remove(self, receipt: StoredReceipt) -> None:
        """Delete a stored receipt; a missing file is not an error."""
        try:
            receipt.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("receipt_cleanup_failed", path=str(receipt.path), error=str(e))
