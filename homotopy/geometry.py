"""
Exact planar geometry primitives.

All coordinates are stored as ``fractions.Fraction`` so that the predicates
the decomposition depends on (orientation, point-on-line, polygon
containment, segment intersection and direction ordering) are decided
exactly. A tie between two directions corrupts the sector assembly, so none
of these predicates uses a floating point tolerance.

Floats are only produced on the way out (distances, ``to_array``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from functools import total_ordering
from numbers import Real
from typing import Iterable, List, Sequence, Tuple, Union

import numpy as np

Scalar = Union[int, float, str, Fraction]


def to_fraction(value: Scalar) -> Fraction:
    """Convert a coordinate to an exact rational.

    Floats are converted exactly (binary value), strings may be decimal
    (``"2.5"``) or rational (``"5/2"``).
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid coordinate")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Coordinate must be finite, got {value}")
    if isinstance(value, (Real, str)):
        return Fraction(value)
    raise TypeError(f"Cannot use {type(value).__name__} as a coordinate")


def _cross(ax: Fraction, ay: Fraction, bx: Fraction, by: Fraction) -> Fraction:
    return ax * by - ay * bx


def _dot(ax: Fraction, ay: Fraction, bx: Fraction, by: Fraction) -> Fraction:
    return ax * bx + ay * by


def _sign(value: Fraction) -> int:
    return (value > 0) - (value < 0)


# =============================================================================
# Points and Directions
# =============================================================================


@dataclass(frozen=True)
class Point2D:
    """
    Exact 2D point.

    Attributes:
        x: x-coordinate
        y: y-coordinate
    """
    x: Fraction
    y: Fraction

    def __post_init__(self):
        object.__setattr__(self, "x", to_fraction(self.x))
        object.__setattr__(self, "y", to_fraction(self.y))

    @classmethod
    def of(cls, value: Union["Point2D", Sequence[Scalar]]) -> "Point2D":
        """Create from a Point2D or an (x, y) pair."""
        if isinstance(value, Point2D):
            return value
        if len(value) != 2:
            raise ValueError(f"A point needs two coordinates, got {len(value)}")
        return cls(value[0], value[1])

    def squared_distance(self, other: "Point2D") -> Fraction:
        """Exact squared Euclidean distance."""
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance(self, other: "Point2D") -> float:
        """Euclidean distance."""
        return math.sqrt(self.squared_distance(other))

    def translated(self, dx: Fraction, dy: Fraction) -> "Point2D":
        return Point2D(self.x + dx, self.y + dy)

    def reflected_through(self, center: "Point2D") -> "Point2D":
        """Point mirrored through ``center``."""
        return Point2D(2 * center.x - self.x, 2 * center.y - self.y)

    def to_tuple(self) -> Tuple[float, float]:
        return float(self.x), float(self.y)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [x, y]."""
        return np.array([float(self.x), float(self.y)])

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def _quadrant(dx: Fraction, dy: Fraction) -> int:
    # Quadrants are half-open so that every direction falls in exactly one:
    # 0 -> [0, 90), 1 -> [90, 180), 2 -> [180, 270), 3 -> [270, 360)
    if dx > 0 and dy >= 0:
        return 0
    if dx <= 0 and dy > 0:
        return 1
    if dx < 0 and dy <= 0:
        return 2
    return 3


@total_ordering
class Direction2D:
    """
    Direction of a non-zero vector.

    Directions are totally ordered by their counter-clockwise angle in
    [0, 2*pi) measured from the positive x-axis. Two vectors that are
    positive multiples of one another are the same direction.
    """

    __slots__ = ("dx", "dy", "_quadrant")

    def __init__(self, dx: Scalar, dy: Scalar):
        self.dx = to_fraction(dx)
        self.dy = to_fraction(dy)
        if self.dx == 0 and self.dy == 0:
            raise ValueError("Direction of a zero vector is undefined")
        self._quadrant = _quadrant(self.dx, self.dy)

    @classmethod
    def between(cls, source: Point2D, target: Point2D) -> "Direction2D":
        """Direction from ``source`` towards ``target``."""
        return cls(target.x - source.x, target.y - source.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Direction2D):
            return NotImplemented
        return (
            self._quadrant == other._quadrant
            and _cross(self.dx, self.dy, other.dx, other.dy) == 0
        )

    def __lt__(self, other: "Direction2D") -> bool:
        if not isinstance(other, Direction2D):
            return NotImplemented
        if self._quadrant != other._quadrant:
            return self._quadrant < other._quadrant
        return _cross(self.dx, self.dy, other.dx, other.dy) > 0

    def __hash__(self) -> int:
        slope = self.dy / self.dx if self.dx != 0 else None
        return hash((self._quadrant, slope))

    def __neg__(self) -> "Direction2D":
        return Direction2D(-self.dx, -self.dy)

    def counterclockwise_in_between(self, d1: "Direction2D", d2: "Direction2D") -> bool:
        """Whether this direction lies strictly inside the counter-clockwise sweep from d1 to d2.

        When d1 == d2 the sweep is the full turn, so every direction except
        d1 itself is in between.
        """
        if d1 < d2:
            return d1 < self < d2
        return d1 < self or self < d2

    def angle(self) -> float:
        """Counter-clockwise angle from the positive x-axis in [0, 2*pi)."""
        angle = math.atan2(float(self.dy), float(self.dx))
        return angle if angle >= 0 else angle + 2 * math.pi

    def __repr__(self) -> str:
        return f"Direction2D({self.dx}, {self.dy})"


# =============================================================================
# Predicates
# =============================================================================


def orientation(p: Point2D, q: Point2D, r: Point2D) -> int:
    """Sign of the turn p -> q -> r: 1 left, -1 right, 0 collinear."""
    return _sign(_cross(q.x - p.x, q.y - p.y, r.x - p.x, r.y - p.y))


class Side(Enum):
    """Location of a point relative to a closed polygon."""
    INSIDE = "inside"
    BOUNDARY = "boundary"
    OUTSIDE = "outside"


# =============================================================================
# Lines, Segments and Rays
# =============================================================================


@dataclass(frozen=True)
class Line2D:
    """Infinite line through two distinct points."""
    p: Point2D
    q: Point2D

    def __post_init__(self):
        if self.p == self.q:
            raise ValueError(f"A line needs two distinct points, got {self.p} twice")

    def has_on(self, point: Point2D) -> bool:
        return orientation(self.p, self.q, point) == 0


Intersection = Union[Point2D, "Segment2D", None]


def _intersect(
    p: Point2D, rx: Fraction, ry: Fraction,
    q: Point2D, sx: Fraction, sy: Fraction,
    bounded: bool,
) -> Intersection:
    """Intersect ``p + t*r`` with the segment ``q + u*s`` (0 <= u <= 1).

    ``t`` ranges over [0, 1] when ``bounded`` (a segment) and [0, inf)
    otherwise (a ray).
    """
    qpx = q.x - p.x
    qpy = q.y - p.y
    rxs = _cross(rx, ry, sx, sy)

    if rxs != 0:
        t = _cross(qpx, qpy, sx, sy) / rxs
        u = _cross(qpx, qpy, rx, ry) / rxs
        if t < 0 or (bounded and t > 1) or u < 0 or u > 1:
            return None
        return Point2D(p.x + t * rx, p.y + t * ry)

    if _cross(qpx, qpy, rx, ry) != 0:
        return None

    rr = _dot(rx, ry, rx, ry)
    if rr == 0:
        other = Segment2D(q, q.translated(sx, sy))
        return p if other.has_on(p) else None

    # Collinear: project the other segment onto p + t*r
    t0 = _dot(qpx, qpy, rx, ry) / rr
    t1 = t0 + _dot(sx, sy, rx, ry) / rr
    lo = max(min(t0, t1), Fraction(0))
    hi = max(t0, t1)
    if bounded:
        hi = min(hi, Fraction(1))
    if lo > hi:
        return None

    start = Point2D(p.x + lo * rx, p.y + lo * ry)
    if lo == hi:
        return start
    return Segment2D(start, Point2D(p.x + hi * rx, p.y + hi * ry))


@dataclass(frozen=True)
class Segment2D:
    """Closed segment from ``source`` to ``target``."""
    source: Point2D
    target: Point2D

    @property
    def dx(self) -> Fraction:
        return self.target.x - self.source.x

    @property
    def dy(self) -> Fraction:
        return self.target.y - self.source.y

    def is_degenerate(self) -> bool:
        return self.source == self.target

    def direction(self) -> Direction2D:
        return Direction2D(self.dx, self.dy)

    def squared_length(self) -> Fraction:
        return self.source.squared_distance(self.target)

    def length(self) -> float:
        return math.sqrt(self.squared_length())

    def has_on(self, point: Point2D) -> bool:
        """Whether ``point`` lies on the closed segment."""
        if orientation(self.source, self.target, point) != 0:
            return False
        return (
            min(self.source.x, self.target.x) <= point.x <= max(self.source.x, self.target.x)
            and min(self.source.y, self.target.y) <= point.y <= max(self.source.y, self.target.y)
        )

    def intersection(self, other: "Segment2D") -> Intersection:
        """Exact intersection: None, a single point, or an overlapping segment."""
        return _intersect(
            self.source, self.dx, self.dy,
            other.source, other.dx, other.dy,
            bounded=True,
        )

    def squared_distance_to(self, point: Point2D) -> Fraction:
        """Exact squared distance from ``point`` to the closed segment."""
        length_sq = self.squared_length()
        if length_sq == 0:
            return self.source.squared_distance(point)
        t = _dot(point.x - self.source.x, point.y - self.source.y, self.dx, self.dy) / length_sq
        t = min(max(t, Fraction(0)), Fraction(1))
        closest = Point2D(self.source.x + t * self.dx, self.source.y + t * self.dy)
        return closest.squared_distance(point)

    def distance_to(self, point: Point2D) -> float:
        return math.sqrt(self.squared_distance_to(point))


@dataclass(frozen=True)
class Ray2D:
    """Half-line starting at ``source``."""
    source: Point2D
    direction: Direction2D

    @classmethod
    def through(cls, source: Point2D, point: Point2D) -> "Ray2D":
        return cls(source, Direction2D.between(source, point))

    def intersection(self, segment: Segment2D) -> Intersection:
        return _intersect(
            self.source, self.direction.dx, self.direction.dy,
            segment.source, segment.dx, segment.dy,
            bounded=False,
        )


# =============================================================================
# Polygons
# =============================================================================


class Polygon2D:
    """
    Closed polygon given by its vertices in order (no closing repeat).

    Orientation is not normalised; ``signed_area`` is positive for
    counter-clockwise vertex order.
    """

    def __init__(self, vertices: Iterable[Union[Point2D, Sequence[Scalar]]]):
        self.vertices: Tuple[Point2D, ...] = tuple(Point2D.of(v) for v in vertices)
        n = len(self.vertices)
        self.edges: Tuple[Segment2D, ...] = tuple(
            Segment2D(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)
        )

    def __len__(self) -> int:
        return len(self.vertices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polygon2D):
            return NotImplemented
        return self.vertices == other.vertices

    def __hash__(self) -> int:
        return hash(self.vertices)

    def __repr__(self) -> str:
        return f"Polygon2D({[str(v) for v in self.vertices]})"

    def signed_area(self) -> Fraction:
        total = Fraction(0)
        for edge in self.edges:
            total += _cross(edge.source.x, edge.source.y, edge.target.x, edge.target.y)
        return total / 2

    def area(self) -> float:
        return abs(float(self.signed_area()))

    def bbox(self) -> Tuple[Fraction, Fraction, Fraction, Fraction]:
        """Bounding box (x_min, y_min, x_max, y_max)."""
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        return min(xs), min(ys), max(xs), max(ys)

    def is_simple(self) -> bool:
        """Whether the boundary has no self-intersections or repeated vertices."""
        n = len(self.edges)
        if n < 3:
            return False
        if any(edge.is_degenerate() for edge in self.edges):
            return False

        for i in range(n):
            for j in range(i + 1, n):
                hit = self.edges[i].intersection(self.edges[j])
                if hit is None:
                    continue
                if j == i + 1:
                    shared = self.edges[i].target
                elif i == 0 and j == n - 1:
                    shared = self.edges[i].source
                else:
                    return False
                # Adjacent edges may only touch at their shared vertex
                if hit != shared:
                    return False
        return True

    def bounded_side(self, point: Point2D) -> Side:
        """Exact location of ``point`` relative to the polygon."""
        for edge in self.edges:
            if edge.has_on(point):
                return Side.BOUNDARY

        inside = False
        for edge in self.edges:
            a, b = edge.source, edge.target
            if (a.y > point.y) != (b.y > point.y):
                x_cross = a.x + (point.y - a.y) * (b.x - a.x) / (b.y - a.y)
                if point.x < x_cross:
                    inside = not inside
        return Side.INSIDE if inside else Side.OUTSIDE

    def interior_point(self) -> Point2D:
        """A point strictly inside the polygon, computed exactly.

        A horizontal scanline halfway between the two lowest distinct vertex
        heights never passes through a vertex; the midpoint of its first
        inside span is strictly interior.
        """
        heights = sorted(set(v.y for v in self.vertices))
        if len(heights) < 2:
            raise ValueError("Polygon has no interior")
        y = (heights[0] + heights[1]) / 2

        crossings: List[Fraction] = []
        for edge in self.edges:
            a, b = edge.source, edge.target
            if (a.y > y) != (b.y > y):
                crossings.append(a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y))
        crossings.sort()
        return Point2D((crossings[0] + crossings[1]) / 2, y)

    def squared_distance_to(self, point: Point2D) -> Fraction:
        """Exact squared distance from ``point`` to the polygon boundary."""
        return min(edge.squared_distance_to(point) for edge in self.edges)

    def to_array(self) -> np.ndarray:
        """Vertices as an (n, 2) float array."""
        return np.array([v.to_tuple() for v in self.vertices], dtype=float)
