"""Planar geometry primitives used by the construction engine."""

import math
from typing import Iterable, NamedTuple, Sequence, Tuple

import numpy as np

DEFAULT_TRIANGLE_TOLERANCE = 0.01


class Point(NamedTuple):
    """A position in drawing coordinates (y grows downwards on screen)."""
    x: float
    y: float


def as_point(value) -> Point:
    """Coerce an (x, y) pair or anything with ``x``/``y`` attributes into a Point."""
    if isinstance(value, Point):
        return value
    if hasattr(value, "x") and hasattr(value, "y"):
        return Point(float(value.x), float(value.y))
    x, y = value
    return Point(float(x), float(y))


def orientation(a: Point, b: Point, c: Point) -> float:
    """Twice the signed area of triangle a-b-c (positive when counter-clockwise in math axes)."""
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """
    True iff the open segments p1-p2 and q1-q2 properly cross.

    Touching at a shared endpoint, or an endpoint lying on the other
    segment, is not a crossing.
    """
    d1 = orientation(q1, q2, p1)
    d2 = orientation(q1, q2, p2)
    d3 = orientation(p1, p2, q1)
    d4 = orientation(p1, p2, q2)
    return d1 * d2 < 0 and d3 * d4 < 0


def triangle_area(a: Point, b: Point, c: Point) -> float:
    """Unsigned area of triangle a-b-c."""
    return abs(orientation(a, b, c)) / 2.0


def point_in_triangle(p: Point, a: Point, b: Point, c: Point,
                      tolerance: float = DEFAULT_TRIANGLE_TOLERANCE) -> bool:
    """
    True iff p lies inside or on the closed triangle a-b-c.

    Compares the triangle's area with the sum of the three sub-triangles
    formed with p, within an absolute tolerance.
    """
    area = triangle_area(a, b, c)
    split = triangle_area(p, b, c) + triangle_area(a, p, c) + triangle_area(a, b, p)
    return abs(area - split) < tolerance


def centroid(points: Iterable[Point]) -> Point:
    """Arithmetic mean of a non-empty collection of points."""
    coords = np.asarray([tuple(p) for p in points], dtype=float)
    if coords.size == 0:
        raise ValueError("centroid() of an empty point set")
    mean = coords.mean(axis=0)
    return Point(float(mean[0]), float(mean[1]))


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def perpendicular(v: Tuple[float, float]) -> Tuple[float, float]:
    """Rotate a vector by 90 degrees."""
    return (-v[1], v[0])


def normalize(v: Tuple[float, float]) -> Tuple[float, float]:
    """Unit vector along v, or (0, 0) for a zero vector."""
    length = math.hypot(v[0], v[1])
    if length == 0:
        return (0.0, 0.0)
    return (v[0] / length, v[1] / length)


def offset(origin: Point, direction: Tuple[float, float], amount: float) -> Point:
    """The point ``amount`` units from origin along direction."""
    return Point(origin.x + direction[0] * amount, origin.y + direction[1] * amount)


def mean_distance(point: Point, others: Sequence[Point]) -> float:
    """Average distance from point to every point in others (0 when empty)."""
    if not others:
        return 0.0
    coords = np.asarray([tuple(p) for p in others], dtype=float)
    return float(np.hypot(coords[:, 0] - point.x, coords[:, 1] - point.y).mean())


def min_distance(point: Point, others: Sequence[Point]) -> float:
    """Smallest distance from point to any point in others (inf when empty)."""
    if not others:
        return math.inf
    coords = np.asarray([tuple(p) for p in others], dtype=float)
    return float(np.hypot(coords[:, 0] - point.x, coords[:, 1] - point.y).min())
