"""
JSON import/export of graphs.

Format::

    {
      "vertices": [{"id": 1, "color": null, "pos": {"x": 400.0, "y": 240.0}}, ...],
      "edges": [[0, 1], ...],
      "colors": [1, 2, 3, 4]
    }

Edge endpoints are indices into ``vertices``. Array order is preserved in
both directions so the indices stay valid across a round trip.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from .errors import MalformedImportError
from .geometry import Point
from .graph import DEFAULT_PALETTE, Graph, Vertex, edge_key

logger = structlog.get_logger()

PathLike = Union[str, Path]


def graph_to_dict(graph: Graph) -> Dict[str, Any]:
    return {
        "vertices": [
            {"id": v.id, "color": v.color, "pos": {"x": v.pos.x, "y": v.pos.y}}
            for v in graph.vertices
        ],
        "edges": [[a, b] for a, b in graph.edges],
        "colors": list(graph.palette),
    }


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid id or color
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _vertex_from_dict(index: int, raw: Any) -> Vertex:
    raw = raw if isinstance(raw, dict) else {}
    vertex_id = _as_int(raw.get("id"))
    pos = raw.get("pos") if isinstance(raw.get("pos"), dict) else {}
    return Vertex(
        id=vertex_id if vertex_id is not None else index + 1,
        pos=Point(_as_float(pos.get("x")), _as_float(pos.get("y"))),
        color=_as_int(raw.get("color")),
    )


def _palette_from(raw: Any) -> tuple:
    if isinstance(raw, list) and raw:
        palette = [_as_int(c) for c in raw]
        if all(c is not None for c in palette):
            return tuple(palette)
    return DEFAULT_PALETTE


def graph_from_dict(data: Any) -> Graph:
    """
    Build a ``Graph`` from the exchange format.

    ``vertices`` and ``edges`` must be lists and every edge must reference
    two distinct existing vertices. Other fields fall back to defaults:
    a missing id becomes ``index + 1``, a bad color becomes uncolored, a
    missing position becomes (0, 0) and a missing palette is [1, 2, 3, 4].

    Raises:
        MalformedImportError: If the required structure is missing or broken
    """
    if not isinstance(data, dict):
        raise MalformedImportError("Graph data must be a JSON object")
    raw_vertices = data.get("vertices")
    raw_edges = data.get("edges")
    if not isinstance(raw_vertices, list):
        raise MalformedImportError("'vertices' must be an array")
    if not isinstance(raw_edges, list):
        raise MalformedImportError("'edges' must be an array")

    vertices = tuple(_vertex_from_dict(i, raw) for i, raw in enumerate(raw_vertices))
    n = len(vertices)

    edges: List = []
    seen = set()
    for raw in raw_edges:
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise MalformedImportError(f"Edge {raw!r} is not a pair of indices")
        a, b = _as_int(raw[0]), _as_int(raw[1])
        if a is None or b is None or not (0 <= a < n and 0 <= b < n):
            raise MalformedImportError(f"Edge {raw!r} references a missing vertex")
        if a == b:
            raise MalformedImportError(f"Edge {raw!r} is a self-loop")
        key = edge_key(a, b)
        if key not in seen:
            seen.add(key)
            edges.append(key)

    ids = [v.id for v in vertices]
    if len(set(ids)) != len(ids):
        logger.warning("Imported graph has duplicate vertex ids", vertices=n)

    return Graph(vertices=vertices, edges=tuple(edges), palette=_palette_from(data.get("colors")))


def dumps(graph: Graph) -> str:
    return json.dumps(graph_to_dict(graph), indent=2)


def loads(text: str) -> Graph:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedImportError(f"Invalid JSON: {e}") from e
    return graph_from_dict(data)


def save_graph_file(graph: Graph, path: PathLike) -> Path:
    """Write ``graph`` as pretty-printed JSON, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dumps(graph), encoding="utf-8")
    logger.info("Graph saved", path=str(target), vertices=len(graph.vertices), edges=len(graph.edges))
    return target


def load_graph_file(path: PathLike) -> Graph:
    """
    Read a graph file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        MalformedImportError: If the file content is not a valid graph
    """
    source = Path(path)
    graph = loads(source.read_text(encoding="utf-8"))
    logger.info("Graph loaded", path=str(source), vertices=len(graph.vertices), edges=len(graph.edges))
    return graph
