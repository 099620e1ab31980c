from .fusion import router as fusion_router
from .items import router as items_router
from .system import router as system_router

__all__ = [
    "fusion_router",
    "items_router",
    "system_router",
]
