"""
Segment validation and command-segment parsing.

A segment is a consecutive run of periphery vertices (wrapping around the
end of the periphery is allowed) that a new vertex attaches to. It must
contain at least two vertices, all pairwise connected.
"""

import re
from typing import Iterable, List, Optional, Sequence

import structlog

from .graph import Edge, edge_key

logger = structlog.get_logger()

# "A, 1-3", "a,2,3,4" or just "1-3" / "2,3,4"
_COMMAND_RE = re.compile(r"^\s*(?:A\s*,)?\s*([\d,\-\s]+)$", re.IGNORECASE)


def is_fully_connected(edges: Iterable[Edge], segment: Sequence[int]) -> bool:
    """
    True iff every unordered pair of vertices in ``segment`` is joined by an edge.

    Args:
        edges: Graph edges (any orientation)
        segment: Vertex indices
    """
    present = {edge_key(a, b) for a, b in edges if a != b}
    for i in range(len(segment)):
        for j in range(i + 1, len(segment)):
            a, b = segment[i], segment[j]
            if a == b or edge_key(a, b) not in present:
                return False
    return True


def parse_ranks(argument: str, periphery_length: int) -> Optional[List[int]]:
    """
    Parse the rank part of a command: ``"a-b"`` (inclusive, a <= b) or ``"a,b,c"``.

    Ranks outside ``1..periphery_length`` are dropped; a range is clamped
    to the periphery before it is expanded.

    Returns:
        Sorted distinct 1-based ranks (possibly empty), or None if the text
        is malformed.
    """
    text = re.sub(r"\s", "", argument)
    if not text:
        return None
    if "-" in text:
        parts = text.split("-")
        if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
            return None
        start, end = int(parts[0]), int(parts[1])
        if start > end:
            return None
        return list(range(max(start, 1), min(end, periphery_length) + 1))
    pieces = text.split(",")
    if not all(piece.isdigit() for piece in pieces):
        return None
    return sorted(set(rank for rank in map(int, pieces) if 1 <= rank <= periphery_length))


def consecutive_order(ranks: Sequence[int], periphery_length: int) -> Optional[List[int]]:
    """
    Order sorted ranks as a run along the periphery.

    A plain run like [3, 4, 5] is returned as is. A wraparound run such as
    [1, 2, 7, 8] on an 8-vertex periphery must have exactly one gap, start
    at rank 1 and end at the last rank; it is returned in walking order
    ([7, 8, 1, 2]). Anything else yields None.
    """
    if len(ranks) < 2:
        return None
    gaps = [i for i in range(1, len(ranks)) if ranks[i] != ranks[i - 1] + 1]
    if not gaps:
        return list(ranks)
    if len(gaps) > 1:
        return None
    first_part = list(ranks[:gaps[0]])
    second_part = list(ranks[gaps[0]:])
    if first_part[0] != 1 or second_part[-1] != periphery_length:
        return None
    return second_part + first_part


def resolve_segment(command: str, periphery: Sequence[int]) -> Optional[List[int]]:
    """
    Resolve a segment command against the current periphery.

    Ranks are 1-based positions along ``periphery`` (not vertex ids).

    Returns:
        Vertex indices in periphery walking order, or None when the command
        is malformed, selects fewer than two positions inside the periphery
        (ranks beyond it are ignored), or the positions are not consecutive.
    """
    match = _COMMAND_RE.match(command or "")
    if not match:
        return None
    ranks = parse_ranks(match.group(1), len(periphery))
    if ranks is None:
        return None
    if len(ranks) < 2:
        logger.debug("Too few segment ranks inside periphery", ranks=ranks, periphery_length=len(periphery))
        return None
    ordered = consecutive_order(ranks, len(periphery))
    if ordered is None:
        return None
    return [periphery[rank - 1] for rank in ordered]


def periphery_segments(periphery: Sequence[int], length: int, starts: Optional[Iterable[int]] = None) -> List[List[int]]:
    """
    Consecutive runs of ``length`` periphery vertices.

    Args:
        periphery: Periphery order
        length: Run length
        starts: Rotational offsets to use (default: every offset in order)
    """
    n = len(periphery)
    if n == 0 or length < 1 or length > n:
        return []
    offsets = range(n) if starts is None else starts
    return [[periphery[(start + i) % n] for i in range(length)] for start in offsets]


def boundary_cycle(segment: Sequence[int]) -> List[Edge]:
    """Consecutive pairs of the segment including the closing pair, deduplicated."""
    pairs: List[Edge] = []
    seen = set()
    for i in range(len(segment)):
        a, b = segment[i], segment[(i + 1) % len(segment)]
        if a == b:
            continue
        key = edge_key(a, b)
        if key not in seen:
            seen.add(key)
            pairs.append((a, b))
    return pairs
