"""
Renderer-facing views of a graph.

The renderer never mutates engine state; it only consumes the payload built
here: vertices with labels and periphery ranks, edges, and the periphery
order.
"""

from enum import Enum
from typing import Any, Dict, Optional

from .graph import Graph, Vertex
from .periphery import periphery_of, periphery_ranks


class LabelMode(str, Enum):
    ORDER = "order"  # vertex id
    COLOR = "color"  # color number, id while uncolored


def toggle_label_mode(mode: LabelMode) -> LabelMode:
    return LabelMode.COLOR if LabelMode(mode) == LabelMode.ORDER else LabelMode.ORDER


def vertex_label(vertex: Vertex, mode: LabelMode) -> str:
    if LabelMode(mode) == LabelMode.COLOR and vertex.color is not None:
        return str(vertex.color)
    return str(vertex.id)


def truncate(graph: Graph, limit: Optional[int]) -> Graph:
    """
    Sub-graph of the vertices with id <= ``limit`` and the edges among them.

    Array order is kept and edge indices are remapped. A missing limit or
    one below 1 returns the graph unchanged.
    """
    if limit is None or limit < 1:
        return graph
    kept = [i for i, v in enumerate(graph.vertices) if v.id <= limit]
    if len(kept) == len(graph.vertices):
        return graph
    remap = {old: new for new, old in enumerate(kept)}
    edges = tuple(
        (remap[a], remap[b]) if remap[a] < remap[b] else (remap[b], remap[a])
        for a, b in graph.edges
        if a in remap and b in remap
    )
    return Graph(vertices=tuple(graph.vertices[i] for i in kept), edges=edges, palette=graph.palette)


def render_view(graph: Graph, label_mode: LabelMode = LabelMode.ORDER,
                limit: Optional[int] = None) -> Dict[str, Any]:
    """
    Build the renderer payload.

    Args:
        graph: Graph to show
        label_mode: How vertex labels are derived
        limit: Optional "jump to state" vertex id limit

    Returns:
        Dict with ``vertices``, ``edges``, ``periphery`` (vertex ids in walk
        order), ``label_mode`` and counts.
    """
    mode = LabelMode(label_mode)
    shown = truncate(graph, limit)
    periphery = periphery_of(shown)
    ranks = periphery_ranks(periphery)

    vertices = []
    for i, v in enumerate(shown.vertices):
        vertices.append({
            "id": v.id,
            "x": v.pos.x,
            "y": v.pos.y,
            "color": v.color,
            "label": vertex_label(v, mode),
            "on_periphery": i in ranks,
            "periphery_rank": ranks.get(i),
        })

    return {
        "vertices": vertices,
        "edges": [[a, b] for a, b in shown.edges],
        "periphery": [shown.vertices[i].id for i in periphery],
        "palette": list(shown.palette),
        "label_mode": mode.value,
        "vertex_count": len(shown.vertices),
        "edge_count": len(shown.edges),
    }
