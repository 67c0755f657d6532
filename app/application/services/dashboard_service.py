from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import time

from ..errors import (
    IdentityError,
    NotFoundError,
    PersistenceError,
    QuotaExceededError,
    StorageError,
    ValidationError,
)
from ..ports.audit_logger import AuditLogger
from ..ports.storage_repo import ObjectStorage
from ..ports.upload_repo import UploadRecord, UploadRepository
from .anonymous_service import ANONYMOUS_PREFIX
from .payload import normalize_text, read_file_payload
from ...config import settings

logger = logging.getLogger(__name__)

QUOTA_SCOPES = ("user", "global")
RESERVED_PREFIXES = (ANONYMOUS_PREFIX, ".", "..")


def check_storage_identity(user_id: str) -> None:
    """An identity is its own top-level storage folder: one plain path segment outside reserved names."""
    if (
        not user_id
        or user_id in RESERVED_PREFIXES
        or any(ch in user_id for ch in ("/", "\\", "\x00"))
    ):
        logger.warning(f"Rejected storage identity {user_id!r}")
        raise IdentityError()


@dataclass
class UploadPage:
    items: List[UploadRecord]
    page: int
    page_size: int
    has_more: bool


@dataclass
class DashboardService:
    repo: UploadRepository
    storage: ObjectStorage
    audit: Optional[AuditLogger] = None
    quota_bytes: int = settings.STORAGE_QUOTA_BYTES
    quota_scope: str = settings.STORAGE_QUOTA_SCOPE
    page_size: int = settings.PAGE_SIZE
    max_file_size: int = settings.MAX_FILE_SIZE
    max_text_size: int = settings.MAX_TEXT_SIZE
    millis: Callable[[], int] = lambda: int(time.time() * 1000)

    def __post_init__(self) -> None:
        if self.quota_scope not in QUOTA_SCOPES:
            raise ValueError(f"quota_scope must be one of {QUOTA_SCOPES}, got {self.quota_scope!r}")

    async def upload(self, user_id: str, file=None, text: Optional[str] = None) -> UploadRecord:
        check_storage_identity(user_id)
        text = normalize_text(text, self.max_text_size)
        payload = await read_file_payload(file, self.max_file_size)
        if payload is None and text is None:
            raise ValidationError("File or text is required")

        url = None
        filename = None
        thumbnail_url = None
        upload_type = "text"

        if payload is not None:
            self.check_quota(user_id, payload.size)
            path = f"{user_id}/{self.millis()}.{payload.extension}"
            try:
                self.storage.put(path, payload.data, payload.content_type)
                url = self.storage.public_url(path)
            except Exception as e:
                logger.error(f"Error uploading file for user {user_id}: {e}")
                self._audit("upload", user_id, success=False, details={"stage": "storage"})
                raise StorageError() from e

            filename = payload.filename
            upload_type = payload.upload_type
            if upload_type == "image":
                thumbnail_url = url

        try:
            record = self.repo.create(
                user_id=user_id,
                type=upload_type,
                filename=filename,
                url=url,
                text_content=text,
                thumbnail_url=thumbnail_url,
            )
        except Exception as e:
            logger.error(f"Error saving upload for user {user_id}: {e}")
            self._audit("upload", user_id, success=False, details={"stage": "record", "orphan_url": url})
            raise PersistenceError() from e

        self._audit("upload", user_id, upload_id=record.id, details={"type": upload_type})
        return record

    def check_quota(self, user_id: str, new_size: int) -> None:
        """Reject when the stored total plus ``new_size`` would go past the ceiling.

        Landing exactly on the ceiling is allowed.
        """
        check_storage_identity(user_id)
        prefix = user_id if self.quota_scope == "user" else ""
        try:
            used = self.storage.total_bytes(prefix)
        except Exception as e:
            logger.error(f"Error reading storage usage: {e}")
            raise StorageError("Failed to check storage usage") from e

        if used + new_size > self.quota_bytes:
            logger.warning(f"Storage quota exceeded for {user_id}: used={used} new={new_size} limit={self.quota_bytes}")
            raise QuotaExceededError(
                f"Storage limit exceeded ({self.quota_bytes // (1024 * 1024)}MB). Please try again later."
            )

    def list_page(self, user_id: str, page: int = 0) -> UploadPage:
        if page < 0:
            raise ValidationError("Page must be zero or greater")
        try:
            items = self.repo.list_for_user(user_id, offset=page * self.page_size, limit=self.page_size)
        except Exception as e:
            logger.error(f"Error fetching uploads for user {user_id}: {e}")
            raise PersistenceError("Failed to load uploads") from e
        return UploadPage(
            items=items,
            page=page,
            page_size=self.page_size,
            has_more=len(items) >= self.page_size,
        )

    def delete(self, user_id: str, upload_id: str) -> None:
        record = self.repo.get_for_user(upload_id, user_id)
        if not record:
            raise NotFoundError("Upload not found")

        if record.url:
            path = self.storage.path_from_url(record.url)
            if path:
                try:
                    self.storage.remove(path)
                except Exception as e:
                    # Best effort: the record is still deleted
                    logger.warning(f"Failed to remove object {path}: {e}")

        try:
            self.repo.delete(record.id)
        except Exception as e:
            logger.error(f"Error deleting upload {record.id}: {e}")
            self._audit("delete", user_id, upload_id=record.id, success=False)
            raise PersistenceError("Failed to delete") from e

        self._audit("delete", user_id, upload_id=record.id)

    def _audit(self, action: str, user_id: str, upload_id: Optional[str] = None, success: bool = True, details: Optional[dict] = None) -> None:
        if self.audit is not None:
            self.audit.log(action, user_id=user_id, upload_id=upload_id, success=success, details=details)
