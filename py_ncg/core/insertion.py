"""
Vertex insertion (natural construction).

This module implements:
1. Committing a new vertex onto a validated periphery segment
2. Closing the segment's boundary cycle
3. Interior repair: wiring previously placed vertices that end up inside
   one of the new triangles to that triangle's corners
4. The random-insertion driver that searches segments until one fits

Every function is a pure transformation: the input ``Graph`` is never
modified, and a rejected operation hands back the very same object.
"""

from typing import List, Optional, Sequence

import structlog

from ..config.engine_settings import EngineSettings, resolve_settings
from ..utils.random import RandomSource, shuffled
from .errors import EngineResult, Rejection
from .geometry import Point, point_in_triangle, segments_intersect
from .graph import Bounds, Edge, Graph, Vertex, edge_key
from .periphery import periphery_of
from .placement import find_position
from .segments import boundary_cycle, is_fully_connected, periphery_segments, resolve_segment

logger = structlog.get_logger()

MIN_SEED_VERTICES = 3


def _crosses_any(p: Point, q: Point, endpoints: Edge, graph: Graph) -> bool:
    positions = graph.positions
    for a, b in graph.edges:
        if a in endpoints or b in endpoints:
            continue
        if segments_intersect(p, q, positions[a], positions[b]):
            return True
    return False


def interior_repair(graph: Graph, segment: Sequence[int], new_index: int,
                    engine_settings: Optional[EngineSettings] = None) -> Graph:
    """
    Connect vertices enclosed by the new triangles to the triangle corners.

    For each edge (a, b) of the segment's boundary cycle, every other vertex
    inside triangle (a, b, new) gets edges to a, b and the new vertex.
    A repair edge that would cross an existing edge is skipped so the
    drawing stays planar.
    """
    cfg = resolve_settings(engine_settings)
    positions = graph.positions
    corner_c = positions[new_index]
    repaired = graph
    present = set(graph.edges)

    for a, b in boundary_cycle(segment):
        corner_a, corner_b = positions[a], positions[b]
        for vi, p in enumerate(positions):
            if vi in (a, b, new_index):
                continue
            if not point_in_triangle(p, corner_a, corner_b, corner_c, cfg.triangle_tolerance):
                continue
            for corner in (a, b, new_index):
                key = edge_key(corner, vi)
                if key in present:
                    continue
                if _crosses_any(positions[corner], p, key, repaired):
                    logger.debug("Skipping crossing repair edge", edge=key)
                    continue
                repaired = repaired.with_edges([key])
                present.add(key)
                logger.debug("Interior repair edge added", edge=key, triangle=(a, b, new_index))

    return repaired


def attach_vertex(graph: Graph, segment: Sequence[int], position: Point,
                  engine_settings: Optional[EngineSettings] = None) -> Graph:
    """
    Commit a vertex at ``position`` joined to every segment vertex.

    The segment's boundary cycle is closed and interior repair is run.
    No validation happens here; see ``insert_vertex``.
    """
    new_index = len(graph.vertices)
    vertex = Vertex(id=graph.next_vertex_id(), pos=Point(float(position.x), float(position.y)))
    spokes = [(new_index, s) for s in segment]
    grown = graph.with_vertex(vertex, spokes)
    closed = grown.with_edges(boundary_cycle(segment))
    return interior_repair(closed, segment, new_index, engine_settings)


def _check_segment(graph: Graph, segment: Sequence[int]) -> Optional[EngineResult]:
    if len(graph.vertices) < MIN_SEED_VERTICES:
        return EngineResult.rejected(
            graph, Rejection.INSUFFICIENT_VERTICES,
            "Need at least 3 vertices to add to the periphery. Start a new graph first."
        )
    n = len(graph.vertices)
    if len(segment) < 2 or len(set(segment)) != len(segment) or any(not 0 <= s < n for s in segment):
        return EngineResult.rejected(
            graph, Rejection.INVALID_SEGMENT,
            "A segment needs at least 2 distinct existing vertices."
        )
    if not is_fully_connected(graph.edges, segment):
        return EngineResult.rejected(
            graph, Rejection.INVALID_SEGMENT,
            "Selected vertices must be fully connected to each other for natural construction."
        )
    return None


def insert_vertex(graph: Graph, segment: Sequence[int], bounds: Bounds,
                  engine_settings: Optional[EngineSettings] = None) -> EngineResult:
    """
    Insert a new vertex attached to ``segment``.

    Args:
        graph: Current graph
        segment: Vertex indices (a consecutive periphery run)
        bounds: Drawing area
        engine_settings: Optional tunables

    Returns:
        EngineResult with the grown graph, or the unchanged graph and
        ``INVALID_SEGMENT`` / ``NO_PLACEMENT_FOUND`` / ``INSUFFICIENT_VERTICES``.
    """
    segment = list(segment)
    rejection = _check_segment(graph, segment)
    if rejection is not None:
        logger.debug("Insertion rejected", reason=rejection.reason.value, segment=segment)
        return rejection

    position = find_position(graph, segment, bounds, engine_settings)
    if position is None:
        logger.debug("Insertion rejected", reason=Rejection.NO_PLACEMENT_FOUND.value, segment=segment)
        return EngineResult.rejected(
            graph, Rejection.NO_PLACEMENT_FOUND,
            "No valid position found - would cause edge crossings or invalid placement."
        )

    grown = attach_vertex(graph, segment, position, engine_settings)
    new_index = len(graph.vertices)
    new_vertex = grown.vertices[new_index]
    connected = [graph.vertices[s].id for s in segment]
    logger.info("Vertex inserted",
                vertex_id=new_vertex.id,
                connected_to=connected,
                x=round(position.x, 2),
                y=round(position.y, 2),
                edges=len(grown.edges))
    return EngineResult(
        graph=grown,
        message=f"Added V{new_vertex.id} connected to {', '.join(str(i) for i in connected)}.",
        vertex_index=new_index,
    )


def insert_by_command(graph: Graph, command: str, bounds: Bounds,
                      engine_settings: Optional[EngineSettings] = None) -> EngineResult:
    """
    Insert using a periphery-rank command such as ``"A, 1-3"`` or ``"A, 2,3"``.
    """
    if len(graph.vertices) < MIN_SEED_VERTICES:
        return EngineResult.rejected(
            graph, Rejection.INSUFFICIENT_VERTICES,
            "Need at least 3 vertices to add to the periphery. Start a new graph first."
        )
    periphery = periphery_of(graph)
    segment = resolve_segment(command, periphery)
    if segment is None:
        logger.info("Segment command rejected", command=command, periphery_length=len(periphery))
        return EngineResult.rejected(
            graph, Rejection.INVALID_SEGMENT,
            "Invalid command. Use consecutive periphery positions (e.g. 'A, 1-3' or 'A, 2,3,4'); "
            "at least 2 are needed."
        )
    return insert_vertex(graph, segment, bounds, engine_settings)


def insert_random(graph: Graph, bounds: Bounds, rng: Optional[RandomSource] = None,
                  engine_settings: Optional[EngineSettings] = None) -> EngineResult:
    """
    Insert a vertex on some valid periphery segment.

    Segment lengths 2..min(len(periphery), max_random_segment_length) are
    tried shortest first; within a length the starting offsets are
    shuffled. The first segment that validates and finds a position wins.
    """
    cfg = resolve_settings(engine_settings)
    if len(graph.vertices) < MIN_SEED_VERTICES:
        return EngineResult.rejected(
            graph, Rejection.INSUFFICIENT_VERTICES,
            "Need at least 3 vertices to add to the periphery. Start a new graph first."
        )

    periphery = periphery_of(graph)
    if len(periphery) < 2:
        return EngineResult.rejected(
            graph, Rejection.INVALID_SEGMENT,
            "Periphery too small - need at least 2 periphery vertices."
        )

    attempts = 0
    max_length = min(len(periphery), cfg.max_random_segment_length)
    for length in range(2, max_length + 1):
        starts: List[int] = shuffled(range(len(periphery)), rng)
        for segment in periphery_segments(periphery, length, starts):
            attempts += 1
            if not is_fully_connected(graph.edges, segment):
                continue
            result = insert_vertex(graph, segment, bounds, cfg)
            if result.ok:
                logger.info("Random insertion succeeded", attempts=attempts, segment_length=length)
                return result

    logger.info("Random insertion exhausted every segment", attempts=attempts)
    return EngineResult.rejected(
        graph, Rejection.NO_PLACEMENT_FOUND,
        "No valid position found - would cause edge-crossing or no fully connected periphery segment available."
    )
