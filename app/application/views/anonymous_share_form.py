from dataclasses import dataclass
from typing import Callable, Optional
import logging

from ..errors import ShareError
from ..ports.upload_repo import UploadRecord
from ..services.anonymous_service import AnonymousShareService
from ...utils import generate_share_code

logger = logging.getLogger(__name__)


@dataclass
class AnonymousShareForm:
    """State of the share-without-signing-in form.

    ``submit`` draws a fresh code, stores the share under it and keeps the
    code for display. A front end shows ``code`` once it is set and
    ``error`` when the share was rejected.
    """

    service: AnonymousShareService
    generate_code: Callable[[], str] = generate_share_code
    code: Optional[str] = None
    record: Optional[UploadRecord] = None
    uploading: bool = False
    error: Optional[str] = None

    async def submit(self, file=None, text: Optional[str] = None) -> Optional[str]:
        if self.uploading:
            return None
        self.uploading = True
        self.error = None
        self.code = None
        self.record = None
        code = self.generate_code()
        try:
            record = await self.service.upload(code, file=file, text=text)
        except ShareError as e:
            logger.info(f"Anonymous share rejected: {e.detail}")
            self.error = e.detail
            return None
        finally:
            self.uploading = False
        self.code = code
        self.record = record
        return code

    def reset(self) -> None:
        self.code = None
        self.record = None
        self.error = None
