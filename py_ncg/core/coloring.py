"""Greedy vertex coloring."""

import structlog

from .errors import EngineResult, Rejection
from .graph import Graph

logger = structlog.get_logger()

FALLBACK_COLOR = 1


def color_vertex(graph: Graph, index: int) -> int:
    """
    Smallest palette color not used by any colored neighbor of ``index``.

    A vertex that already has a color keeps it. When every palette color is
    taken by a neighbor the first palette color is returned, so a
    neighboring conflict is possible with palettes smaller than the degree.
    """
    current = graph.vertices[index].color
    if current is not None:
        return current
    used = {graph.vertices[j].color for j in graph.neighbors(index)}
    for color in range(1, len(graph.palette) + 1):
        if color not in used:
            return color
    logger.debug("Palette exhausted, using fallback color",
                 vertex_id=graph.vertices[index].id,
                 palette_size=len(graph.palette))
    return FALLBACK_COLOR


def color_last_vertex(graph: Graph) -> EngineResult:
    """
    Color the most recently added vertex (the last in array order).

    Returns:
        EngineResult with the colored graph, ``INSUFFICIENT_VERTICES`` for
        graphs under 3 vertices, or the silent ``ALREADY_COLORED`` no-op.
    """
    if len(graph.vertices) < 3:
        return EngineResult.rejected(
            graph, Rejection.INSUFFICIENT_VERTICES,
            "Need at least 3 vertices before coloring."
        )
    index = len(graph.vertices) - 1
    vertex = graph.vertices[index]
    if vertex.color is not None:
        return EngineResult.rejected(
            graph, Rejection.ALREADY_COLORED,
            f"V{vertex.id} is already colored."
        )

    color = color_vertex(graph, index)
    colored = graph.with_color(index, color)
    logger.info("Vertex colored", vertex_id=vertex.id, color=color)
    return EngineResult(graph=colored, message=f"Colored V{vertex.id} with color {color}.",
                        vertex_index=index)


def uncolored_count(graph: Graph) -> int:
    return sum(1 for v in graph.vertices if v.color is None)

