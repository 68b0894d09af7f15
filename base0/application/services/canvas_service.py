"""
Per-wallet canvas state.

Each wallet gets its own CanvasGraph, created from the default layout on
first access and kept for the life of the process.

Dependencies: base0.core.canvas
System role: Canvas state holder for the playground endpoints
"""

from base0.core.canvas.graph import CanvasGraph, default_canvas
from base0.core.exceptions import WalletNotConnectedError


class CanvasService:
    """Holds one canvas graph per wallet address."""

    def __init__(self) -> None:
        self._graphs: dict[str, CanvasGraph] = {}

    def get(self, address: str | None) -> CanvasGraph:
        if not address:
            raise WalletNotConnectedError()
        key = address.lower()
        if key not in self._graphs:
            self._graphs[key] = default_canvas()
        return self._graphs[key]

    def reset(self, address: str) -> CanvasGraph:
        self._graphs.pop(address.lower(), None)
        return self.get(address)
