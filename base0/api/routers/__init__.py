"""API routers."""

from .canvas import router as canvas_router
from .content import router as content_router
from .generate_image import router as generate_image_router
from .health import router as health_router
from .history import router as history_router
from .storage import router as storage_router

__all__ = [
    "canvas_router",
    "content_router",
    "generate_image_router",
    "health_router",
    "history_router",
    "storage_router",
]
