from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, select

from .....db.models import Upload
from .....application.ports.upload_repo import UploadRepository, UploadRecord


class SqlUploadRepository(UploadRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_record(self, u: Upload) -> UploadRecord:
        return UploadRecord(
            id=u.id,
            user_id=u.user_id,
            type=u.type,
            filename=u.filename,
            url=u.url,
            text_content=u.text_content,
            thumbnail_url=u.thumbnail_url,
            code=u.code,
            expires_at=u.expires_at,
            created_at=u.created_at,
        )

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
        entry = Upload(
            user_id=user_id,
            type=type,
            filename=filename,
            url=url,
            text_content=text_content,
            thumbnail_url=thumbnail_url,
            code=code,
            expires_at=expires_at,
        )
        self.session.add(entry)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(entry)
        return self._to_record(entry)

    def find_active_by_code(self, code: str, now: datetime) -> Optional[UploadRecord]:
        row = self.session.exec(
            select(Upload)
            .where(Upload.code == code)
            .where(Upload.expires_at > now)
            .order_by(Upload.created_at.desc())
        ).first()
        return self._to_record(row) if row else None

    def list_for_user(self, user_id: str, offset: int, limit: int) -> List[UploadRecord]:
        rows = self.session.exec(
            select(Upload)
            .where(Upload.user_id == user_id)
            .order_by(Upload.created_at.desc(), Upload.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return [self._to_record(r) for r in rows]

    def get_for_user(self, upload_id: str, user_id: str) -> Optional[UploadRecord]:
        row = self.session.exec(
            select(Upload)
            .where(Upload.id == upload_id)
            .where(Upload.user_id == user_id)
        ).first()
        return self._to_record(row) if row else None

    def delete(self, upload_id: str) -> None:
        row = self.session.get(Upload, upload_id)
        if not row:
            return
        self.session.delete(row)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
