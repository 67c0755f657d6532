from dataclasses import dataclass
from typing import Optional

from ..errors import FileTooLargeError, TextTooLargeError
from ...utils import classify_upload, file_extension


@dataclass
class FilePayload:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return file_extension(self.filename)

    @property
    def upload_type(self) -> str:
        return classify_upload(self.content_type, has_file=True)


async def read_file_payload(file, max_size: int) -> Optional[FilePayload]:
    """Read an ``UploadFile``-like object, returning None when no file was sent."""
    if file is None or not getattr(file, "filename", None):
        return None

    file.file.seek(0, 2)
    file_size = file.file.tell()
    file.file.seek(0)
    if file_size > max_size:
        raise FileTooLargeError(f"File size must be less than {max_size // (1024 * 1024)}MB")

    data = await file.read()
    return FilePayload(filename=file.filename, content_type=file.content_type, data=data)


def normalize_text(text: Optional[str], max_size: Optional[int] = None) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    if max_size is not None and len(text.encode("utf-8")) > max_size:
        raise TextTooLargeError(f"Text must be less than {max_size // 1024}KB")
    return text or None
