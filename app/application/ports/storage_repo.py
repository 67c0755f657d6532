from typing import Optional, Protocol


class ObjectStorage(Protocol):
    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...

    def path_from_url(self, url: str) -> Optional[str]:
        ...

    def remove(self, path: str) -> None:
        ...

    def total_bytes(self, prefix: str = "") -> int:
        ...
