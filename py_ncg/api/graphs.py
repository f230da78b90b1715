"""
Graph construction API endpoints.

This module exposes the construction engine to a front end:
- Starting a seed triangle and managing graph sessions
- Inserting vertices by periphery command or at random
- Relayout and greedy coloring of the newest vertex
- Label mode toggling and "jump to state" views
- JSON export/import and graph files on disk

Engine rejections are not HTTP errors: they come back as
``success: false`` with a machine readable ``reason`` and the unchanged
graph. HTTP errors are reserved for unknown graphs and bad requests.
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
import structlog

from ..config import settings
from ..core.coloring import color_last_vertex
from ..core.errors import EngineResult, MalformedImportError
from ..core.graph import Bounds, start_graph
from ..core.insertion import insert_by_command, insert_random
from ..core.relayout import relayout
from ..core.serialization import graph_from_dict, graph_to_dict
from ..core.view import LabelMode, render_view, toggle_label_mode
from .store import GraphSession, SessionNotFoundError, store

logger = structlog.get_logger()

# Create router for graph endpoints
router = APIRouter(prefix="/graphs", tags=["Graphs"])


# Request/Response models
class StartRequest(BaseModel):
    """Request to start a new seed triangle."""

    width: Optional[float] = Field(default=None, ge=100, le=4000, description="Drawing width")
    height: Optional[float] = Field(default=None, ge=100, le=4000, description="Drawing height")
    seed: Optional[str] = Field(default=None, description="Seed for the session's random insertions")


class InsertRequest(BaseModel):
    """Segment command such as 'A, 1-3' or 'A, 2,3,4' (1-based periphery ranks)."""

    command: str = Field(description="Periphery segment command")


class ImportRequest(BaseModel):
    """Serialized graph plus the drawing area to place it in."""

    data: Dict[str, Any] = Field(description="Graph in the exchange format")
    width: Optional[float] = Field(default=None, ge=100, le=4000, description="Drawing width")
    height: Optional[float] = Field(default=None, ge=100, le=4000, description="Drawing height")
    seed: Optional[str] = Field(default=None, description="Seed for the session's random insertions")


class FileRequest(BaseModel):
    filename: Optional[str] = Field(default=None, description="File name inside the data directory")


class VertexView(BaseModel):
    id: int
    x: float
    y: float
    color: Optional[int] = None
    label: str
    on_periphery: bool
    periphery_rank: Optional[int] = None


class GraphView(BaseModel):
    """Renderer payload for a graph."""

    graph_id: str
    width: float
    height: float
    vertices: List[VertexView]
    edges: List[List[int]]
    periphery: List[int] = Field(description="Vertex ids along the outer face, in walk order")
    palette: List[int]
    label_mode: LabelMode
    vertex_count: int
    edge_count: int


class OperationResponse(BaseModel):
    """Response model for graph operations."""

    success: bool = Field(description="Whether the graph changed as requested")
    message: str = Field(description="Result message")
    reason: Optional[str] = Field(default=None, description="Rejection reason code when unsuccessful")
    graph: Optional[GraphView] = Field(default=None, description="Current graph after the operation")


class GraphSummary(BaseModel):
    id: str
    seed: str
    vertex_count: int
    edge_count: int
    width: float
    height: float
    created_at: datetime
    updated_at: datetime


# Helper functions
def resolve_bounds(width: Optional[float], height: Optional[float]) -> Bounds:
    return Bounds(width or settings.default_canvas_width, height or settings.default_canvas_height)


def graph_view(session: GraphSession, limit: Optional[int] = None) -> GraphView:
    payload = render_view(session.graph, session.label_mode, limit)
    return GraphView(graph_id=session.id, width=session.bounds.width, height=session.bounds.height, **payload)



def session_or_404(graph_id: str) -> GraphSession:
    """Get the graph session or raise 404."""
    try:
        return store.get(graph_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Graph not found")


def apply_result(session: GraphSession, result: EngineResult, operation: str) -> OperationResponse:
    """Commit an engine result to the session and build the response."""
    session.replace_graph(result.graph)
    if result.is_error:
        logger.info("Operation rejected", graph_id=session.id, operation=operation,
                    reason=result.reason.value)
    return OperationResponse(
        success=result.ok,
        message=result.message,
        reason=result.reason.value if result.reason is not None else None,
        graph=graph_view(session),
    )


def summarize(session: GraphSession) -> GraphSummary:
    return GraphSummary(
        id=session.id,
        seed=session.seed,
        vertex_count=len(session.graph.vertices),
        edge_count=len(session.graph.edges),
        width=session.bounds.width,
        height=session.bounds.height,
        created_at=session.created_at,
        updated_at=session.updated_at,
    )


# Session endpoints
@router.post("", response_model=OperationResponse)
async def start(request: Optional[StartRequest] = None):
    """Start a new graph with the three-vertex seed triangle."""
    request = request or StartRequest()
    bounds = resolve_bounds(request.width, request.height)
    session = store.create(start_graph(bounds), bounds, request.seed)
    return OperationResponse(success=True, message="Seed triangle created.", graph=graph_view(session))


@router.get("", response_model=List[GraphSummary])
async def list_graphs():
    """List all graph sessions."""
    return [summarize(session) for session in store.list()]


@router.get("/{graph_id}", response_model=GraphView)
async def get_graph(
    graph_id: str,
    label_mode: Optional[LabelMode] = Query(default=None, description="Override the session label mode"),
    limit: Optional[int] = Query(default=None, description="Only show vertices with id <= limit"),
):
    """Get the renderer view of a graph, optionally truncated to an earlier state."""
    with session_or_404(graph_id) as session:
        payload = render_view(session.graph, label_mode or session.label_mode, limit)
        return GraphView(graph_id=session.id, width=session.bounds.width,
                         height=session.bounds.height, **payload)


@router.delete("/{graph_id}")
async def delete_graph(graph_id: str):
    """Discard a graph session."""
    try:
        store.delete(graph_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Graph not found")
    return {"success": True, "message": f"Graph {graph_id} deleted"}


# Construction endpoints
@router.post("/{graph_id}/vertices", response_model=OperationResponse)
async def insert(graph_id: str, request: InsertRequest):
    """Insert a vertex on the periphery segment named by the command."""
    with session_or_404(graph_id) as session:
        result = insert_by_command(session.graph, request.command, session.bounds)
        return apply_result(session, result, "insert")


@router.post("/{graph_id}/vertices/random", response_model=OperationResponse)
async def insert_at_random(graph_id: str):
    """Insert a vertex on a random valid periphery segment."""
    with session_or_404(graph_id) as session:
        result = insert_random(session.graph, session.bounds, rng=session.rng)
        return apply_result(session, result, "insert_random")


@router.post("/{graph_id}/relayout", response_model=OperationResponse)
async def relayout_graph(graph_id: str):
    """Recompute all positions, keeping the topology."""
    with session_or_404(graph_id) as session:
        result = relayout(session.graph, session.bounds, rng=session.rng)
        return apply_result(session, result, "relayout")


@router.post("/{graph_id}/color-last", response_model=OperationResponse)
async def color_last(graph_id: str):
    """Greedily color the most recently added vertex."""
    with session_or_404(graph_id) as session:
        return apply_result(session, color_last_vertex(session.graph), "color_last")


@router.post("/{graph_id}/label-mode/toggle", response_model=OperationResponse)
async def toggle_labels(graph_id: str):
    """Switch vertex labels between insertion order and color number."""
    with session_or_404(graph_id) as session:
        session.label_mode = toggle_label_mode(session.label_mode)
        return OperationResponse(
            success=True,
            message=f"Label mode set to {session.label_mode.value}.",
            graph=graph_view(session),
        )


# Import/export endpoints
@router.get("/{graph_id}/export")
async def export_graph(graph_id: str) -> Dict[str, Any]:
    """Export a graph in the exchange format."""
    with session_or_404(graph_id) as session:
        return graph_to_dict(session.graph)


@router.post("/import", response_model=OperationResponse)
async def import_graph(request: ImportRequest):
    """Create a new graph session from exchange-format data."""
    try:
        graph = graph_from_dict(request.data)
    except MalformedImportError as e:
        logger.info("Import rejected", error=str(e))
        return OperationResponse(success=False, message=f"Import failed: {e}", reason=e.reason.value)

    bounds = resolve_bounds(request.width, request.height)
    session = store.create(graph, bounds, request.seed)
    return OperationResponse(
        success=True,
        message=f"Imported {len(graph.vertices)} vertices and {len(graph.edges)} edges.",
        graph=graph_view(session),
    )


@router.post("/{graph_id}/save", response_model=OperationResponse)
async def save_graph(graph_id: str, request: Optional[FileRequest] = None):
    """Write the graph to a JSON file in the data directory."""
    filename = request.filename if request else None
    with session_or_404(graph_id) as session:
        try:
            path = store.save(session, filename)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return OperationResponse(success=True, message=f"Saved to {path.name}.", graph=graph_view(session))


@router.post("/{graph_id}/load", response_model=OperationResponse)
async def load_graph(graph_id: str, request: FileRequest):
    """
    Replace the graph with one read from a JSON file.

    A malformed file leaves the current graph untouched.
    """
    if not request.filename:
        raise HTTPException(status_code=400, detail="filename is required")
    with session_or_404(graph_id) as session:
        try:
            graph = store.load(request.filename)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail="Graph file not found")
        except MalformedImportError as e:
            logger.info("Graph file rejected", graph_id=graph_id, filename=request.filename, error=str(e))
            return OperationResponse(
                success=False, message=f"Load failed: {e}", reason=e.reason.value, graph=graph_view(session)
            )
        session.replace_graph(graph)
        return OperationResponse(
            success=True,
            message=f"Loaded {len(graph.vertices)} vertices from {request.filename}.",
            graph=graph_view(session),
        )
