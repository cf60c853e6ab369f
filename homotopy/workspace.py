"""
Bounded rectangular workspace.

A workspace of integer size W x H covers the pixel grid [0, W) x [0, H);
its boundary rectangle runs through the outermost pixel centres, from
(0, 0) to (W - 1, H - 1).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from homotopy.exceptions import InvalidWorkspaceError
from homotopy.geometry import Point2D, Segment2D


@dataclass(frozen=True)
class Workspace:
    """
    Axis-aligned workspace rectangle.

    Attributes:
        width: Number of columns (>= 2)
        height: Number of rows (>= 2)
    """
    width: int
    height: int

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidWorkspaceError(f"{name} must be an integer, got {value!r}")
            if value < 2:
                raise InvalidWorkspaceError(f"{name} must be >= 2, got {value}")

    @property
    def x_max(self) -> int:
        return self.width - 1

    @property
    def y_max(self) -> int:
        return self.height - 1

    def center(self) -> Point2D:
        """Centre of the boundary rectangle."""
        return Point2D(Fraction(self.x_max, 2), Fraction(self.y_max, 2))

    def corners(self) -> Tuple[Point2D, Point2D, Point2D, Point2D]:
        """Rectangle corners in counter-clockwise order starting at the origin."""
        return (
            Point2D(0, 0),
            Point2D(self.x_max, 0),
            Point2D(self.x_max, self.y_max),
            Point2D(0, self.y_max),
        )

    def boundary_edges(self) -> Tuple[Segment2D, Segment2D, Segment2D, Segment2D]:
        """Bottom, right, top and left boundary edges."""
        bottom_left, bottom_right, top_right, top_left = self.corners()
        return (
            Segment2D(bottom_left, bottom_right),
            Segment2D(bottom_right, top_right),
            Segment2D(top_left, top_right),
            Segment2D(bottom_left, top_left),
        )

    def strictly_contains(self, point: Point2D) -> bool:
        """Whether ``point`` lies in the open interior of the rectangle."""
        return 0 < point.x < self.x_max and 0 < point.y < self.y_max

    def contains(self, point: Point2D) -> bool:
        return 0 <= point.x <= self.x_max and 0 <= point.y <= self.y_max
