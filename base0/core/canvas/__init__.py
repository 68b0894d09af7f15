"""Canvas node graph."""

from base0.core.canvas.graph import (
    BASE_IMAGE_HANDLE,
    DEFAULT_PROMPT,
    IMAGE_HANDLE,
    CanvasGraph,
    default_canvas,
)

__all__ = ["BASE_IMAGE_HANDLE", "DEFAULT_PROMPT", "IMAGE_HANDLE", "CanvasGraph", "default_canvas"]
