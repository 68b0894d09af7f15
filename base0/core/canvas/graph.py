"""
Canvas node graph.

Edges only describe which node fields get copied where after a user action;
nothing executes automatically. Outgoing edges are indexed by source node so
propagation touches only the affected edges. Cycles are allowed and harmless
because propagation is one hop per action.

Dependencies: base0.models.canvas
System role: Server-side state of the generation canvas
"""

import base64
import json
import logging
from typing import Any

from base0.core.exceptions import NotFoundError, ValidationError
from base0.models.canvas import CanvasEdge, CanvasNode, CanvasSnapshot, Position

logger = logging.getLogger(__name__)

IMAGE_HANDLE = "image"
BASE_IMAGE_HANDLE = "baseImage"

DEFAULT_PROMPT = "A beautiful cyberpunk city at night with neon lights"


class CanvasGraph:
    """Nodes, edges and an adjacency index keyed by source node ID."""

    def __init__(self) -> None:
        self.nodes: dict[str, CanvasNode] = {}
        self.edges: dict[str, CanvasEdge] = {}
        self._outgoing: dict[str, list[str]] = {}
        self.selected_node_id: str | None = None

    def node(self, node_id: str) -> CanvasNode:
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"Node {node_id} not found")
        return node

    def add_node(self, node: CanvasNode) -> CanvasNode:
        if node.id in self.nodes:
            raise ValidationError(f"Node {node.id} already exists", field="id")
        self.nodes[node.id] = node
        return node

    def connect(self, edge: CanvasEdge) -> CanvasEdge:
        """Add an edge between two existing nodes; edge IDs are unique."""
        if edge.id in self.edges:
            raise ValidationError(f"Edge {edge.id} already exists", field="id")
        self.node(edge.source)
        self.node(edge.target)

        self.edges[edge.id] = edge
        self._outgoing.setdefault(edge.source, []).append(edge.id)
        return edge

    def remove_edge(self, edge_id: str) -> None:
        edge = self.edges.pop(edge_id, None)
        if edge is None:
            raise NotFoundError(f"Edge {edge_id} not found")
        self._outgoing[edge.source].remove(edge_id)

    def outgoing(self, node_id: str, source_handle: str | None = None) -> list[CanvasEdge]:
        edges = [self.edges[edge_id] for edge_id in self._outgoing.get(node_id, [])]
        if source_handle is None:
            return edges
        return [edge for edge in edges if edge.source_handle == source_handle]

    def _update(self, node_id: str, **data: Any) -> None:
        node = self.node(node_id)
        node.data = {**node.data, **data}

    def _clear(self, node_id: str, *keys: str) -> None:
        node = self.node(node_id)
        node.data = {k: v for k, v in node.data.items() if k not in keys}

    def load_image(self, node_id: str, data: str, mime_type: str = "image/png") -> str:
        """
        Put an image on a loadImage node and hand it to connected generators.

        Args:
            node_id: loadImage node
            data: Base64 file content, or an existing data URI
            mime_type: Media type used when `data` is raw base64

        Returns:
            str: The image as a data URI
        """
        if data.startswith("data:"):
            image_url = data
        else:
            try:
                base64.b64decode(data, validate=True)
            except ValueError as e:
                raise ValidationError("Invalid image data", field="data") from e
            image_url = f"data:{mime_type};base64,{data}"

        self._update(node_id, imageUrl=image_url)
        for edge in self.outgoing(node_id, IMAGE_HANDLE):
            self._update(edge.target, baseImageUrl=image_url)
        return image_url

    def remove_image(self, node_id: str) -> None:
        """Clear a loadImage node and the base image of its generators."""
        self._clear(node_id, "imageUrl")
        for edge in self.outgoing(node_id, IMAGE_HANDLE):
            self._clear(edge.target, "baseImageUrl")

    def remove_base_image(self, node_id: str) -> None:
        self._clear(node_id, "baseImageUrl")

    def resolve_base_image(self, generator_id: str) -> str | None:
        """Image of the node wired into the generator's baseImage handle, if any."""
        self.node(generator_id)
        for edge in self.edges.values():
            if edge.target != generator_id or edge.target_handle != BASE_IMAGE_HANDLE:
                continue
            image_url = self.nodes[edge.source].data.get("imageUrl")
            if image_url:
                self._update(generator_id, baseImageUrl=image_url)
                return image_url
        return None

    def mark_generating(self, node_id: str) -> None:
        self._update(node_id, isGenerating=True)
        self._clear(node_id, "error")

    def apply_result(self, node_id: str, result: dict[str, Any], prompt: str | None = None) -> None:
        """Store a generation result on the node and copy it to every downstream node."""
        image_url = result.get("imageUrl")
        self._update(
            node_id,
            isGenerating=False,
            generatedImage=image_url,
            metadata=result.get("metadata"),
        )
        response = json.dumps(result, indent=2, default=str)
        for edge in self.outgoing(node_id):
            self._update(
                edge.target,
                imageUrl=image_url,
                response=response,
                isLoading=False,
                showPrompt=prompt is not None,
                prompt=prompt,
            )

    def apply_error(self, node_id: str, message: str) -> None:
        self._update(node_id, isGenerating=False, error=message or "Unknown error")

    def select(self, node_id: str | None) -> None:
        if node_id is not None:
            self.node(node_id)
        self.selected_node_id = node_id

    def set_preview_value(self, node_id: str, value: Any) -> None:
        """Show arbitrary text or JSON on a previewAny node."""
        node = self.node(node_id)
        if node.type != "previewAny":
            raise ValidationError(f"Node {node_id} is not a previewAny node", field="type")
        response = value if isinstance(value, str) else json.dumps(value, indent=2, default=str)
        self._update(node_id, response=response)

    def snapshot(self) -> CanvasSnapshot:
        return CanvasSnapshot(
            nodes=[node.model_copy(deep=True) for node in self.nodes.values()],
            edges=list(self.edges.values()),
            selected_node_id=self.selected_node_id,
        )


def default_canvas() -> CanvasGraph:
    """Initial playground layout: loader -> generator -> image and text previews."""
    graph = CanvasGraph()
    graph.add_node(CanvasNode(id="load-1", type="loadImage", position=Position(x=100, y=150)))
    graph.add_node(
        CanvasNode(
            id="generator-1",
            type="imageGenerator",
            position=Position(x=500, y=100),
            data={
                "prompt": DEFAULT_PROMPT,
                "width": 512,
                "height": 512,
                "version": "standard",
                "preference": "photography",
            },
        )
    )
    graph.add_node(
        CanvasNode(
            id="preview-1",
            type="previewImage",
            position=Position(x=950, y=150),
            data={"title": "Preview Image"},
        )
    )
    graph.add_node(
        CanvasNode(
            id="preview-any-1",
            type="previewAny",
            position=Position(x=950, y=450),
            data={"response": "Empty response from image model..."},
        )
    )

    graph.connect(
        CanvasEdge(
            id="load-to-generator",
            source="load-1",
            target="generator-1",
            source_handle=IMAGE_HANDLE,
            target_handle=BASE_IMAGE_HANDLE,
        )
    )
    graph.connect(
        CanvasEdge(
            id="generator-to-preview",
            source="generator-1",
            target="preview-1",
            source_handle="output",
            target_handle="image",
        )
    )
    graph.connect(
        CanvasEdge(
            id="generator-to-any",
            source="generator-1",
            target="preview-any-1",
            source_handle="output",
            target_handle="source",
        )
    )
    return graph
