import os
import logging
from typing import Optional

from ...config import settings
from ...application.ports.storage_repo import ObjectStorage

logger = logging.getLogger(__name__)


class LocalObjectStorage(ObjectStorage):
    """Object store backed by a directory; objects are served from ``/uploads``."""

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None) -> None:
        self.root = os.path.abspath(root or settings.UPLOAD_DIR)
        self.base_url = (base_url or settings.public_base_url).rstrip("/")

    def _resolve(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, path))
        if full != self.root and not full.startswith(self.root + os.sep):
            raise ValueError(f"Path escapes storage root: {path}")
        return full

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        dest = self._resolve(path)
        if os.path.exists(dest):
            # Matches object-store semantics: no silent overwrite
            raise FileExistsError(f"Object already exists: {path}")
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        with open(dest, "wb") as f:
            f.write(data)
        logger.info(f"Stored object {path} ({len(data)} bytes, {content_type or 'unknown type'})")

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def path_from_url(self, url: str) -> Optional[str]:
        _, sep, path = url.partition("/uploads/")
        if not sep or not path:
            return None
        return path

    def remove(self, path: str) -> None:
        dest = self._resolve(path)
        if os.path.exists(dest):
            os.remove(dest)

    def total_bytes(self, prefix: str = "") -> int:
        start = self._resolve(prefix) if prefix else self.root
        if not os.path.isdir(start):
            return 0
        total = 0
        for dirpath, _dirnames, filenames in os.walk(start):
            for name in filenames:
                total += os.path.getsize(os.path.join(dirpath, name))
        return total
