"""Graph data model for natural construction."""

import math
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple

import structlog

from ..config.engine_settings import EngineSettings, resolve_settings
from .errors import GraphIntegrityError
from .geometry import Point

logger = structlog.get_logger()

Edge = Tuple[int, int]

DEFAULT_PALETTE: Tuple[int, ...] = (1, 2, 3, 4)


class Bounds(NamedTuple):
    """Drawing area; positions live in [0, width] x [0, height]."""
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.width / 2.0, self.height / 2.0)


def edge_key(a: int, b: int) -> Edge:
    """Canonical (min, max) form of an undirected edge."""
    if a == b:
        raise GraphIntegrityError(f"Self-loop on vertex {a}")
    return (a, b) if a < b else (b, a)


@dataclass(frozen=True)
class Vertex:
    """A vertex: stable id, position and optional palette color."""
    id: int
    pos: Point
    color: Optional[int] = None


@dataclass(frozen=True)
class Graph:
    """
    Immutable snapshot of a construction.

    Edges reference positions in ``vertices`` and are stored in canonical
    (min, max) form, without duplicates, in the order they were added.
    Every engine operation returns a new ``Graph`` and never mutates its
    input.
    """
    vertices: Tuple[Vertex, ...] = ()
    edges: Tuple[Edge, ...] = ()
    palette: Tuple[int, ...] = DEFAULT_PALETTE

    def __post_init__(self):
        n = len(self.vertices)
        for a, b in self.edges:
            if not (0 <= a < n and 0 <= b < n):
                raise GraphIntegrityError(f"Edge ({a}, {b}) references a missing vertex (have {n})")
            if a >= b:
                raise GraphIntegrityError(f"Edge ({a}, {b}) is not in canonical form")

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def positions(self) -> List[Point]:
        return [v.pos for v in self.vertices]

    def edge_set(self) -> FrozenSet[Edge]:
        return frozenset(self.edges)

    def has_edge(self, a: int, b: int) -> bool:
        return a != b and edge_key(a, b) in self.edge_set()

    def adjacency(self) -> List[List[int]]:
        """Neighbor lists indexed by vertex position."""
        adj: List[List[int]] = [[] for _ in self.vertices]
        for a, b in self.edges:
            adj[a].append(b)
            adj[b].append(a)
        return adj

    def neighbors(self, index: int) -> List[int]:
        return [b if a == index else a for a, b in self.edges if index in (a, b)]

    def next_vertex_id(self) -> int:
        """Ids are monotonic and never reused."""
        if not self.vertices:
            return 1
        return max(v.id for v in self.vertices) + 1

    def with_vertex(self, vertex: Vertex, new_edges: Iterable[Edge] = ()) -> "Graph":
        """Return a copy with one vertex appended and edges merged in."""
        grown = replace(self, vertices=self.vertices + (vertex,))
        return grown.with_edges(new_edges)

    def with_edges(self, new_edges: Iterable[Edge]) -> "Graph":
        """Return a copy with the given edges added (existing ones are skipped)."""
        known: Set[Edge] = set(self.edges)
        added: List[Edge] = []
        for a, b in new_edges:
            key = edge_key(a, b)
            if key not in known:
                known.add(key)
                added.append(key)
        if not added:
            return self
        return replace(self, edges=self.edges + tuple(added))

    def with_positions(self, positions: Sequence[Point]) -> "Graph":
        if len(positions) != len(self.vertices):
            raise GraphIntegrityError("Position count does not match vertex count")
        vertices = tuple(replace(v, pos=Point(float(p[0]), float(p[1]))) for v, p in zip(self.vertices, positions))
        return replace(self, vertices=vertices)

    def with_color(self, index: int, color: Optional[int]) -> "Graph":
        vertices = list(self.vertices)
        vertices[index] = replace(vertices[index], color=color)
        return replace(self, vertices=tuple(vertices))


def build_graph(positions: Sequence, edges: Iterable[Sequence[int]],
                ids: Optional[Sequence[int]] = None,
                colors: Optional[Sequence[Optional[int]]] = None,
                palette: Sequence[int] = DEFAULT_PALETTE) -> Graph:
    """
    Convenience constructor from plain data.

    ``positions`` are (x, y) pairs; ids default to 1..n in order.
    """
    n = len(positions)
    ids = list(ids) if ids is not None else list(range(1, n + 1))
    colors = list(colors) if colors is not None else [None] * n
    vertices = tuple(
        Vertex(id=int(ids[i]), pos=Point(float(positions[i][0]), float(positions[i][1])), color=colors[i])
        for i in range(n)
    )
    return Graph(vertices=vertices, palette=tuple(palette)).with_edges(tuple(e) for e in edges)


def seed_positions(bounds: Bounds, radius: float) -> List[Point]:
    """Apex-up equilateral triangle of the given radius centred in bounds."""
    cx, cy = bounds.center
    dx = radius * math.cos(math.pi / 6)
    dy = radius * math.sin(math.pi / 6)
    return [
        Point(cx, cy - radius),
        Point(cx + dx, cy + dy),
        Point(cx - dx, cy + dy),
    ]


def start_graph(bounds: Bounds, engine_settings: Optional[EngineSettings] = None) -> Graph:
    """
    Create the three-vertex seed triangle.

    Vertices get ids 1, 2, 3 and the edges (0,1), (1,2), (2,0).
    """
    cfg = resolve_settings(engine_settings)
    radius = min(bounds.width, bounds.height) * cfg.seed_radius_fraction
    graph = build_graph(
        seed_positions(bounds, radius),
        [(0, 1), (1, 2), (2, 0)],
        palette=cfg.default_palette,
    )
    logger.info("Seed triangle created", width=bounds.width, height=bounds.height, radius=radius)
    return graph
