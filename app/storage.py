from typing import Optional

from .application.ports.storage_repo import ObjectStorage
from .infrastructure.storage.local_storage import LocalObjectStorage


_storage_instance: Optional[ObjectStorage] = None

def get_storage() -> ObjectStorage:
    global _storage_instance
    if _storage_instance is None:
        _storage_instance = LocalObjectStorage()
    return _storage_instance
