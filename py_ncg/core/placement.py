"""
Placement search for a new vertex.

Given a target segment, walk outward from the segment's centroid and
return the first trial position that is inside the drawing area, is not
crowding an existing vertex, and can be joined to every segment vertex
without crossing an existing edge.
"""

import math
from typing import List, Optional, Sequence, Tuple

import structlog

from ..config.engine_settings import EngineSettings, resolve_settings
from .geometry import (
    Point,
    centroid,
    mean_distance,
    min_distance,
    normalize,
    offset,
    perpendicular,
    segments_intersect,
)
from .graph import Bounds, Graph

logger = structlog.get_logger()

# Centroids closer than this are treated as the same point
_COINCIDENT = 1e-9


def outward_direction(graph: Graph, segment: Sequence[int], segment_centroid: Point,
                      cfg: EngineSettings) -> Tuple[float, float]:
    """
    Unit direction pointing away from the rest of the drawing.

    For two vertices, the edge normal whose probe point is farther (on
    average) from the non-segment vertices. For longer segments, from the
    graph centroid towards the segment centroid.
    """
    positions = graph.positions

    if len(segment) == 2:
        a, b = positions[segment[0]], positions[segment[1]]
        direction = normalize(perpendicular((b.x - a.x, b.y - a.y)))
        members = set(segment)
        others = [p for i, p in enumerate(positions) if i not in members]
        if others:
            ahead = mean_distance(offset(segment_centroid, direction, cfg.probe_distance), others)
            behind = mean_distance(offset(segment_centroid, direction, -cfg.probe_distance), others)
            if behind > ahead:
                direction = (-direction[0], -direction[1])
        return direction

    graph_centroid = centroid(positions)
    delta = (segment_centroid.x - graph_centroid.x, segment_centroid.y - graph_centroid.y)
    if math.hypot(*delta) < _COINCIDENT:
        return normalize(cfg.default_direction)
    return normalize(delta)


def in_bounds(point: Point, bounds: Bounds, margin: float) -> bool:
    return margin <= point.x <= bounds.width - margin and margin <= point.y <= bounds.height - margin


def would_cross(graph: Graph, segment: Sequence[int], candidate: Point) -> bool:
    """
    True if joining ``candidate`` to any segment vertex crosses an existing edge.

    An existing edge is only exempt for the new edge that shares its
    endpoint.
    """
    positions = graph.positions
    for s in segment:
        anchor = positions[s]
        for a, b in graph.edges:
            if s == a or s == b:
                continue
            if segments_intersect(anchor, candidate, positions[a], positions[b]):
                return True
    return False


def candidate_positions(graph: Graph, segment: Sequence[int],
                        engine_settings: Optional[EngineSettings] = None) -> List[Point]:
    """All trial positions for ``segment`` in the order they are tried."""
    cfg = resolve_settings(engine_settings)
    positions = graph.positions
    segment_centroid = centroid(positions[i] for i in segment)
    direction = outward_direction(graph, segment, segment_centroid, cfg)
    return [offset(segment_centroid, direction, d) for d in cfg.trial_distances]


def find_position(graph: Graph, segment: Sequence[int], bounds: Bounds,
                  engine_settings: Optional[EngineSettings] = None) -> Optional[Point]:
    """
    Search for a planar, non-overlapping position for a vertex attached to ``segment``.

    Args:
        graph: Current graph
        segment: Vertex indices the new vertex will connect to (at least 2)
        bounds: Drawing area
        engine_settings: Optional tunables

    Returns:
        The first surviving trial position, or None if every trial is rejected.
    """
    if len(segment) < 2:
        return None
    cfg = resolve_settings(engine_settings)
    positions = graph.positions

    for candidate in candidate_positions(graph, segment, cfg):
        if not in_bounds(candidate, bounds, cfg.bounds_margin):
            continue
        if min_distance(candidate, positions) < cfg.min_vertex_distance:
            continue
        if would_cross(graph, segment, candidate):
            continue
        return candidate

    logger.debug("No placement for segment", segment=list(segment))
    return None
