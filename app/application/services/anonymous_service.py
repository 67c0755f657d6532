from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging

from ..errors import NotFoundError, PersistenceError, StorageError, ValidationError
from ..ports.audit_logger import AuditLogger
from ..ports.storage_repo import ObjectStorage
from ..ports.upload_repo import UploadRecord, UploadRepository
from .payload import normalize_text, read_file_payload
from ...config import settings
from ...utils import is_valid_share_code

logger = logging.getLogger(__name__)

ANONYMOUS_PREFIX = "anonymous"


@dataclass
class AnonymousShareService:
    repo: UploadRepository
    storage: ObjectStorage
    audit: Optional[AuditLogger] = None
    ttl: timedelta = field(default_factory=lambda: timedelta(hours=settings.ANONYMOUS_TTL_HOURS))
    max_file_size: int = settings.MAX_FILE_SIZE
    max_text_size: int = settings.MAX_TEXT_SIZE
    clock: Callable[[], datetime] = datetime.utcnow

    async def upload(self, code: Optional[str], file=None, text: Optional[str] = None) -> UploadRecord:
        if not code:
            raise ValidationError("Code is required")
        if not is_valid_share_code(code):
            raise ValidationError("Code must be 8 digits")

        text = normalize_text(text, self.max_text_size)
        payload = await read_file_payload(file, self.max_file_size)
        if payload is None and text is None:
            raise ValidationError("File or text is required")

        url = None
        filename = None
        thumbnail_url = None
        upload_type = "text"

        if payload is not None:
            path = f"{ANONYMOUS_PREFIX}/{code}.{payload.extension}"
            try:
                self.storage.put(path, payload.data, payload.content_type)
                url = self.storage.public_url(path)
            except Exception as e:
                logger.error(f"Error uploading anonymous file: {e}")
                self._audit("anonymous_upload", code, success=False, details={"stage": "storage"})
                raise StorageError() from e

            filename = payload.filename
            upload_type = payload.upload_type
            if upload_type == "image":
                thumbnail_url = url

        expires_at = self.clock() + self.ttl

        try:
            record = self.repo.create(
                user_id=None,
                type=upload_type,
                filename=filename,
                url=url,
                text_content=text,
                thumbnail_url=thumbnail_url,
                code=code,
                expires_at=expires_at,
            )
        except Exception as e:
            # The stored object (if any) stays orphaned; there is no compensating delete
            logger.error(f"Error saving anonymous upload: {e}")
            self._audit("anonymous_upload", code, success=False, details={"stage": "record", "orphan_url": url})
            raise PersistenceError() from e

        self._audit("anonymous_upload", code, upload_id=record.id, details={"type": upload_type})
        return record

    def resolve(self, code: Optional[str]) -> UploadRecord:
        if not code:
            raise ValidationError("Code is required")

        record = None
        # Malformed codes cannot match anything; report them exactly like a miss
        if is_valid_share_code(code):
            try:
                record = self.repo.find_active_by_code(code, self.clock())
            except Exception as e:
                logger.error(f"Error looking up share code: {e}")
                raise PersistenceError("Download failed") from e

        if record is None:
            self._audit("anonymous_download", code, success=False)
            raise NotFoundError()

        self._audit("anonymous_download", code, upload_id=record.id)
        return record

    def _audit(self, action: str, code: str, upload_id: Optional[str] = None, success: bool = True, details: Optional[dict] = None) -> None:
        if self.audit is not None:
            self.audit.log(action, code=code, upload_id=upload_id, success=success, details=details)
