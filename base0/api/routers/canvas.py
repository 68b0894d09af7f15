"""
Canvas API endpoints.

Routes:
- GET /canvas/{address} - Current canvas
- POST /canvas/{address}/reset - Restore the default layout
- POST /canvas/{address}/nodes - Add a node
- POST /canvas/{address}/edges - Connect two nodes
- DELETE /canvas/{address}/edges/{edge_id} - Remove a connection
- POST /canvas/{address}/select - Select a node (or clear the selection)
- POST /canvas/{address}/nodes/{node_id}/image - Load an image into a loadImage node
- DELETE /canvas/{address}/nodes/{node_id}/image - Remove it again
- DELETE /canvas/{address}/nodes/{node_id}/base-image - Clear a generator's base image
- POST /canvas/{address}/nodes/{node_id}/preview - Show a value on a previewAny node
- POST /canvas/{address}/nodes/{node_id}/generate - Run an imageGenerator node

Every mutation returns the resulting canvas snapshot, except generate which
returns the workflow result.

Dependencies: base0.application.services, base0.models
System role: Generation canvas HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from base0.api.deps.dependencies import get_canvas_service, get_generation_workflow
from base0.application.services.canvas_service import CanvasService
from base0.application.services.generation_workflow import GenerationWorkflow
from base0.models.canvas import (
    CanvasEdge,
    CanvasNode,
    CanvasSnapshot,
    GenerateOnNodeRequest,
    LoadImageRequest,
    WorkflowResult,
)

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/canvas", tags=["canvas"])


@router.get("/{address}", response_model=CanvasSnapshot)
@handle_api_errors
async def get_canvas(
    address: str,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    return canvas_service.get(address).snapshot()


@router.post("/{address}/reset", response_model=CanvasSnapshot)
@handle_api_errors
async def reset_canvas(
    address: str,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    return canvas_service.reset(address).snapshot()


@router.post("/{address}/nodes", response_model=CanvasSnapshot, status_code=201)
@handle_api_errors
async def add_node(
    address: str,
    node: CanvasNode,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.add_node(node)
    return graph.snapshot()


@router.post("/{address}/edges", response_model=CanvasSnapshot, status_code=201)
@handle_api_errors
async def connect_nodes(
    address: str,
    edge: CanvasEdge,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    """
    Connect two existing nodes.

    Raises:
        HTTPException(400): Duplicate edge ID
        HTTPException(404): Unknown source or target node
    """
    graph = canvas_service.get(address)
    graph.connect(edge)
    return graph.snapshot()


@router.delete("/{address}/edges/{edge_id}", response_model=CanvasSnapshot)
@handle_api_errors
async def remove_edge(
    address: str,
    edge_id: str,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.remove_edge(edge_id)
    return graph.snapshot()


@router.post("/{address}/select", response_model=CanvasSnapshot)
@handle_api_errors
async def select_node(
    address: str,
    node_id: str | None = Query(default=None, alias="nodeId"),
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.select(node_id)
    return graph.snapshot()


@router.post("/{address}/nodes/{node_id}/image", response_model=CanvasSnapshot)
@handle_api_errors
async def load_image(
    address: str,
    node_id: str,
    request: LoadImageRequest,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    """
    Put an image on a loadImage node; connected generators receive it as their base image.

    Raises:
        HTTPException(400): Data is neither base64 nor a data URI
        HTTPException(404): Unknown node
    """
    graph = canvas_service.get(address)
    graph.load_image(node_id, request.data, request.mime_type)
    return graph.snapshot()


@router.delete("/{address}/nodes/{node_id}/image", response_model=CanvasSnapshot)
@handle_api_errors
async def remove_image(
    address: str,
    node_id: str,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.remove_image(node_id)
    return graph.snapshot()


@router.delete("/{address}/nodes/{node_id}/base-image", response_model=CanvasSnapshot)
@handle_api_errors
async def remove_base_image(
    address: str,
    node_id: str,
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.remove_base_image(node_id)
    return graph.snapshot()


@router.post("/{address}/nodes/{node_id}/preview", response_model=CanvasSnapshot)
@handle_api_errors
async def set_preview_value(
    address: str,
    node_id: str,
    value: Any = Body(..., embed=True),
    canvas_service: CanvasService = Depends(get_canvas_service),
) -> CanvasSnapshot:
    graph = canvas_service.get(address)
    graph.set_preview_value(node_id, value)
    return graph.snapshot()


@router.post("/{address}/nodes/{node_id}/generate", response_model=WorkflowResult)
@handle_api_errors
async def generate_on_node(
    address: str,
    node_id: str,
    request: GenerateOnNodeRequest,
    workflow: GenerationWorkflow = Depends(get_generation_workflow),
) -> WorkflowResult:
    """
    Run an imageGenerator node and persist its history.

    Args:
        address: Connected wallet
        node_id: imageGenerator node
        request: Generation parameters; the prompt defaults to the node's own
        workflow: Injected GenerationWorkflow

    Returns:
        WorkflowResult: Saved records and the storage outcome

    Raises:
        HTTPException(400): Not an imageGenerator node, or no prompt
        HTTPException(404): Unknown node
        HTTPException(408/503): Image API unreachable
    """
    logger.info(f"{__name__}:generate_on_node - {address} running {node_id}")
    return await workflow.generate_on_node(address, node_id, request)
