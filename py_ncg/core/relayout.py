"""
Topology-preserving relayout.

Positions are rebuilt from scratch by replaying the construction in
vertex-id order:

1. The first three vertices go on the seed triangle centred in the bounds
2. Every later vertex is placed against the periphery segment that best
   matches its original neighbors, using the regular placement search
3. Vertices that fit no segment fall back to random free spots, then to
   the centre with jitter
4. Only original edges are ever added, so the edge set is preserved

Interior repair is not run here: the stored edges already include its
result.
"""

from typing import Dict, List, Optional, Sequence, Set, Tuple

import structlog

from ..config.engine_settings import EngineSettings, resolve_settings
from ..utils.random import RandomSource, resolve_rng
from .errors import EngineResult, Rejection
from .geometry import Point, min_distance
from .graph import Bounds, Edge, Graph, build_graph, edge_key, seed_positions
from .periphery import compute_periphery
from .placement import find_position
from .segments import boundary_cycle, is_fully_connected, periphery_segments

logger = structlog.get_logger()


class _Replay:
    """Partial drawing while the construction is replayed."""

    def __init__(self, original: Graph):
        self.original = original
        self.original_edges: Set[Edge] = set(original.edges)
        self.neighbors: List[Set[int]] = [set(n) for n in original.adjacency()]
        self.order: List[int] = []  # original indices placed so far, in placement order
        self.local: Dict[int, int] = {}  # original index -> local index
        self.positions: Dict[int, Point] = {}
        self.edges: Set[Edge] = set()

    def place(self, index: int, position: Point) -> None:
        self.local[index] = len(self.order)
        self.order.append(index)
        self.positions[index] = position

    def add_original_edge(self, a: int, b: int) -> bool:
        key = edge_key(a, b)
        if key in self.original_edges and key not in self.edges:
            self.edges.add(key)
            return True
        return False

    def connect_to_placed(self, index: int) -> None:
        """Add every original edge between ``index`` and already placed vertices."""
        for other in self.neighbors[index]:
            if other in self.local:
                self.add_original_edge(index, other)

    def snapshot(self) -> Graph:
        """The placed vertices as a standalone graph in local indices."""
        return build_graph(
            [self.positions[i] for i in self.order],
            [(self.local[a], self.local[b]) for a, b in self.edges],
        )


def _score_segments(replay: _Replay, partial: Graph, index: int,
                    max_length: int) -> List[Tuple[int, List[int]]]:
    """Candidate segments (local indices) ranked by shared original neighbors."""
    periphery = compute_periphery(partial.positions, partial.edges)
    wanted = {replay.local[j] for j in replay.neighbors[index] if j in replay.local}
    scored = []
    for length in range(2, min(len(periphery), max_length) + 1):
        for segment in periphery_segments(periphery, length):
            score = sum(1 for s in segment if s in wanted)
            if score == 0 or not is_fully_connected(partial.edges, segment):
                continue
            scored.append((score, segment))
    # Highest score first; shorter segments win ties (stable sort)
    scored.sort(key=lambda item: -item[0])
    return scored


def _random_free_position(placed: Sequence[Point], bounds: Bounds, rng: RandomSource,
                          cfg: EngineSettings) -> Optional[Point]:
    margin = cfg.bounds_margin
    width = max(bounds.width - 2 * margin, 0.0)
    height = max(bounds.height - 2 * margin, 0.0)
    for _ in range(cfg.relayout_random_samples):
        candidate = Point(margin + rng.random() * width, margin + rng.random() * height)
        if min_distance(candidate, placed) >= cfg.min_vertex_distance:
            return candidate
    return None


def relayout(graph: Graph, bounds: Bounds, rng: Optional[RandomSource] = None,
             engine_settings: Optional[EngineSettings] = None) -> EngineResult:
    """
    Recompute every vertex position while keeping the exact topology.

    Args:
        graph: Graph to re-embed
        bounds: Drawing area
        rng: Random source for the fallbacks (injectable for tests)
        engine_settings: Optional tunables

    Returns:
        EngineResult whose graph has the same vertices (ids, colors, array
        order) and the same edges as ``graph``, with new positions.
    """
    cfg = resolve_settings(engine_settings)
    source = resolve_rng(rng)
    n = len(graph.vertices)
    if n < 3:
        return EngineResult.rejected(
            graph, Rejection.INSUFFICIENT_VERTICES,
            "Need at least 3 vertices to recompute the layout."
        )

    order = sorted(range(n), key=lambda i: graph.vertices[i].id)
    replay = _Replay(graph)

    radius = min(bounds.width, bounds.height) * cfg.seed_radius_fraction
    for index, position in zip(order[:3], seed_positions(bounds, radius)):
        replay.place(index, position)
        replay.connect_to_placed(index)

    fallbacks = 0
    for index in order[3:]:
        partial = replay.snapshot()
        chosen: Optional[List[int]] = None
        position: Optional[Point] = None

        for _, segment in _score_segments(replay, partial, index, cfg.max_random_segment_length):
            position = find_position(partial, segment, bounds, cfg)
            if position is not None:
                chosen = [replay.order[s] for s in segment]
                break

        if position is None:
            fallbacks += 1
            position = _random_free_position(list(replay.positions.values()), bounds, source, cfg)
        if position is None:
            center = bounds.center
            jitter = cfg.relayout_jitter
            position = Point(center.x + (source.random() * 2 - 1) * jitter,
                             center.y + (source.random() * 2 - 1) * jitter)
            logger.debug("Relayout fell back to the centre", vertex_id=graph.vertices[index].id)

        replay.place(index, position)
        replay.connect_to_placed(index)
        if chosen is not None:
            for a, b in boundary_cycle(chosen):
                replay.add_original_edge(a, b)

    # Reconciliation: any original edge still missing is restored
    missing = replay.original_edges - replay.edges
    replay.edges |= missing

    positions = [replay.positions[i] for i in range(n)]
    relaid = graph.with_positions(positions)
    logger.info("Relayout complete",
                vertices=n,
                edges=len(relaid.edges),
                fallbacks=fallbacks,
                reconciled_edges=len(missing))
    return EngineResult(graph=relaid, message=f"Layout recomputed for {n} vertices.")
