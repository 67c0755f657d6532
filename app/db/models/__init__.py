# Models package (re-export feature modules for stable imports)
from .uploads.upload import Upload

__all__ = [
    "Upload",
]
