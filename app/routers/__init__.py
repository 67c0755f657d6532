# Routers package
from . import anonymous_router
from . import uploads_router

__all__ = [
    "anonymous_router",
    "uploads_router",
]
