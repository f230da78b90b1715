"""
Outer-face (periphery) detection.

The periphery is derived, never stored: it is recomputed from vertex
positions and edges every time the graph changes.

The walk below is a heuristic. It is exact for graphs grown by the
insertion engine (planar, connected, grown from a triangle) but makes no
promises for arbitrary imported edge sets with crossings or several
components.
"""

import math
from typing import List, Sequence

import structlog

from .geometry import Point
from .graph import Edge, Graph

logger = structlog.get_logger()


def _leftmost(positions: Sequence[Point]) -> int:
    """Index of the leftmost vertex, ties broken by the smallest y."""
    start = 0
    for i, p in enumerate(positions):
        best = positions[start]
        if p.x < best.x or (p.x == best.x and p.y < best.y):
            start = i
    return start


def _sorted_by_angle(center: int, neighbors: List[int], positions: Sequence[Point]) -> List[int]:
    origin = positions[center]
    return sorted(
        neighbors,
        key=lambda j: math.atan2(positions[j].y - origin.y, positions[j].x - origin.x),
    )


def compute_periphery(positions: Sequence[Point], edges: Sequence[Edge]) -> List[int]:
    """
    Ordered cyclic sequence of vertex indices on the outer face.

    Args:
        positions: Vertex positions indexed like the edge endpoints
        edges: Undirected edges as index pairs

    Returns:
        Periphery indices. Empty for fewer than 3 vertices, all three in
        input order for exactly 3.
    """
    n = len(positions)
    if n < 3:
        return []
    if n == 3:
        return [0, 1, 2]

    adjacency: List[List[int]] = [[] for _ in range(n)]
    for a, b in edges:
        adjacency[a].append(b)
        adjacency[b].append(a)

    # The leftmost vertex is always on the outer face
    start = _leftmost(positions)
    periphery: List[int] = []
    current = start
    previous = None

    while True:
        periphery.append(current)
        ordered = _sorted_by_angle(current, adjacency[current], positions)
        if not ordered:
            break

        if previous is None:
            following = ordered[0]
        elif previous in ordered:
            following = ordered[(ordered.index(previous) + 1) % len(ordered)]
        else:
            following = ordered[0]

        if following == start:
            break
        previous, current = current, following
        # Safety bound against malformed input
        if len(periphery) >= n:
            logger.debug("Periphery walk hit the vertex-count bound", vertices=n)
            break

    return periphery


def periphery_of(graph: Graph) -> List[int]:
    """Periphery of a ``Graph``."""
    return compute_periphery(graph.positions, graph.edges)


def periphery_ranks(periphery: Sequence[int]) -> dict:
    """Map vertex index -> 1-based rank along the periphery."""
    return {vertex: rank for rank, vertex in enumerate(periphery, start=1)}
