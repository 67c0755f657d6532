from typing import List, Optional, Protocol
from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass
class UploadRecord:
    id: str
    user_id: Optional[str]
    type: str
    filename: Optional[str]
    url: Optional[str]
    text_content: Optional[str]
    thumbnail_url: Optional[str]
    code: Optional[str]
    expires_at: Optional[datetime]
    created_at: datetime

    def to_dict(self) -> dict:
        return asdict(self)


class UploadRepository(Protocol):
    def create(
        self,
        user_id: Optional[str],
        type: str,
        filename: Optional[str],
        url: Optional[str],
        text_content: Optional[str],
        thumbnail_url: Optional[str],
        code: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> UploadRecord:
        ...

    def find_active_by_code(self, code: str, now: datetime) -> Optional[UploadRecord]:
        ...

    def list_for_user(self, user_id: str, offset: int, limit: int) -> List[UploadRecord]:
        ...

    def get_for_user(self, upload_id: str, user_id: str) -> Optional[UploadRecord]:
        ...

    def delete(self, upload_id: str) -> None:
        ...
