from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..errors import ShareError
from ..ports.upload_repo import UploadRecord
from ..services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


@dataclass
class DashboardFeed:
    """Per-view state of a signed-in user's upload list.

    This is the controller a dashboard front end drives: it renders
    ``items`` and the ``loading``/``uploading``/``error`` flags, and calls
    ``open`` on mount, ``scroll_to_end`` when the list bottom comes into
    view, ``submit`` from the upload form and ``delete`` per item. Failures
    never escape: they are logged and kept in ``error`` as the message to
    show.
    """

    service: DashboardService
    user_id: str
    items: List[UploadRecord] = field(default_factory=list)
    page: int = 0
    has_more: bool = True
    loading: bool = False
    uploading: bool = False
    error: Optional[str] = None

    def open(self) -> None:
        self.page = 0
        self.has_more = True
        self._load(0)

    def scroll_to_end(self) -> None:
        if self.loading or not self.has_more:
            return
        self._load(self.page + 1)

    async def submit(self, file=None, text: Optional[str] = None) -> Optional[UploadRecord]:
        if self.uploading:
            return None
        self.uploading = True
        self.error = None
        try:
            record = await self.service.upload(self.user_id, file=file, text=text)
        except ShareError as e:
            logger.info(f"Upload rejected for {self.user_id}: {e.detail}")
            self.error = e.detail
            return None
        finally:
            self.uploading = False
        self.open()
        return record

    def delete(self, upload_id: str) -> bool:
        self.error = None
        try:
            self.service.delete(self.user_id, upload_id)
        except ShareError as e:
            # Leave the item visible
            logger.info(f"Delete failed for {upload_id}: {e.detail}")
            self.error = e.detail
            return False
        self.items = [item for item in self.items if item.id != upload_id]
        self._reload_through(self.page)
        return True

    def _reload_through(self, last_page: int) -> None:
        # Rows after the deleted one shift up; refetch so the next page offset lines up
        self._load(0)
        for page in range(1, last_page + 1):
            if self.error or not self.has_more:
                break
            self._load(page)

    def _load(self, page: int) -> None:
        self.loading = True
        self.error = None
        try:
            result = self.service.list_page(self.user_id, page)
        except ShareError as e:
            logger.info(f"Loading page {page} failed for {self.user_id}: {e.detail}")
            self.error = e.detail
            return
        finally:
            self.loading = False

        self.items = result.items if page == 0 else self.items + result.items
        self.page = page
        self.has_more = result.has_more
