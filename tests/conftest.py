import os
import tempfile
from datetime import datetime, timedelta
from io import BytesIO
from typing import Dict, List, Optional

import pytest

# Settings are read once at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="codedrop-tests-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from app.application.ports.upload_repo import UploadRecord


class FakeUploadRepo:
    def __init__(self):
        self.rows: List[UploadRecord] = []
        self._id = 1
        self._created = datetime(2024, 1, 1, 12, 0, 0)
        self.fail_create = False
        self.fail_delete = False

    def create(self, user_id, type, filename, url, text_content, thumbnail_url, code=None, expires_at=None):
        if self.fail_create:
            raise RuntimeError("insert failed")
        # Strictly increasing creation times keep ordering deterministic
        self._created += timedelta(seconds=1)
        rec = UploadRecord(
            id=str(self._id),
            user_id=user_id,
            type=type,
            filename=filename,
            url=url,
            text_content=text_content,
            thumbnail_url=thumbnail_url,
            code=code,
            expires_at=expires_at,
            created_at=self._created,
        )
        self.rows.append(rec)
        self._id += 1
        return rec

    def find_active_by_code(self, code: str, now: datetime) -> Optional[UploadRecord]:
        matches = [r for r in self.rows if r.code == code and r.expires_at is not None and r.expires_at > now]
        matches.sort(key=lambda r: r.created_at, reverse=True)
        return matches[0] if matches else None

    def list_for_user(self, user_id: str, offset: int, limit: int) -> List[UploadRecord]:
        mine = sorted((r for r in self.rows if r.user_id == user_id), key=lambda r: r.created_at, reverse=True)
        return mine[offset:offset + limit]

    def get_for_user(self, upload_id: str, user_id: str) -> Optional[UploadRecord]:
        return next((r for r in self.rows if r.id == upload_id and r.user_id == user_id), None)

    def delete(self, upload_id: str) -> None:
        if self.fail_delete:
            raise RuntimeError("delete failed")
        self.rows = [r for r in self.rows if r.id != upload_id]


class FakeStorage:
    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail_put = False
        self.fail_remove = False
        self.puts = 0

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        self.puts += 1
        if self.fail_put:
            raise IOError("bucket unavailable")
        self.objects[path] = data

    def public_url(self, path: str) -> str:
        return f"https://files.example.com/uploads/{path}"

    def path_from_url(self, url: str) -> Optional[str]:
        _, sep, path = url.partition("/uploads/")
        return path if sep and path else None

    def remove(self, path: str) -> None:
        if self.fail_remove:
            raise IOError("remove failed")
        self.objects.pop(path, None)

    def total_bytes(self, prefix: str = "") -> int:
        if not prefix:
            return sum(len(d) for d in self.objects.values())
        return sum(len(d) for p, d in self.objects.items() if p.startswith(prefix + "/"))


class FakeAudit:
    def __init__(self):
        self.entries = []

    def log(self, action, user_id=None, code=None, upload_id=None, success=True, details=None):
        self.entries.append({"action": action, "user_id": user_id, "code": code, "upload_id": upload_id, "success": success})


class DummyUpload:
    def __init__(self, filename: str, content_type: Optional[str] = "application/octet-stream", data: bytes = b"filebytes"):
        self.filename = filename
        self.content_type = content_type
        self.file = BytesIO(data)

    async def read(self):
        return self.file.read()


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def repo():
    return FakeUploadRepo()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def audit():
    return FakeAudit()


@pytest.fixture
def clock():
    return Clock(datetime(2024, 6, 1, 9, 0, 0))


@pytest.fixture
def make_upload():
    return DummyUpload
