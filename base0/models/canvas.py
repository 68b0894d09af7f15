"""
Canvas node graph models.

Dependencies: pydantic
System role: Wire shapes for the generation canvas
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from base0.models.common import CamelModel
from base0.models.prompt import GeneratedImage, UserPrompt
from base0.models.storage import StoredPromptResult

NodeType = Literal["loadImage", "imageGenerator", "previewImage", "previewAny"]


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class CanvasNode(CamelModel):
    """A typed node with free-form data, as rendered by the client."""

    id: str
    type: NodeType
    position: Position = Field(default_factory=Position)
    data: dict[str, Any] = Field(default_factory=dict)


class CanvasEdge(CamelModel):
    """Directed connection between two node handles."""

    id: str
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None


class CanvasSnapshot(CamelModel):
    nodes: list[CanvasNode]
    edges: list[CanvasEdge]
    selected_node_id: str | None = None


class LoadImageRequest(BaseModel):
    """Base64 file content for a loadImage node."""

    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(description="Base64-encoded file bytes or a data URI")
    mime_type: str = Field(default="image/png", alias="mimeType")


class GenerateOnNodeRequest(BaseModel):
    """Generation parameters taken from an imageGenerator node."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    width: int = 512
    height: int = 512
    image_generator_version: Literal["standard", "hd", "genius"] = "standard"
    genius_preference: Literal["anime", "photography", "graphic", "cinematic"] = "photography"
    negative_prompt: str | None = None
    base_image_url: str | None = Field(default=None, alias="baseImageUrl")
    product_type: str | None = Field(default=None, alias="productType")
    scenario: str | None = None


StorageOutcome = Literal["stored", "payment_required", "payment_failed", "local_fallback"]


class WorkflowResult(CamelModel):
    """What happened to one canvas generation and its history records."""

    status: Literal["completed"] = "completed"
    storage_outcome: StorageOutcome
    message: str = ""
    image_url: str
    prompt: UserPrompt
    image: GeneratedImage
    prompt_saved: bool = True
    storage: StoredPromptResult | None = None
