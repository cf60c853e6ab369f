"""
Angular sectors between adjacent rays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from homotopy.geometry import Direction2D, Point2D, Polygon2D, Segment2D, Side
from homotopy.logging import timed
from homotopy.ray_subdivision import RaySubdivision


@dataclass(frozen=True)
class Region:
    """
    One sector of the decomposition.

    The boundary starts at the base point, follows the first bounding ray to
    the workspace boundary, walks counter-clockwise through any enclosed
    workspace corners and returns along the second bounding ray.

    Attributes:
        index: Position of the region in angular order
        boundary: Boundary points, base point first
        start_ray: Index (in sorted ray order) of the first bounding ray,
            None when there are no rays
        end_ray: Index of the second bounding ray, None when there are no rays
    """
    index: int
    boundary: Tuple[Point2D, ...]
    start_ray: Optional[int] = None
    end_ray: Optional[int] = None

    @property
    def base_point(self) -> Point2D:
        return self.boundary[0]

    @property
    def polygon(self) -> Polygon2D:
        """Area covered by the region.

        A region without bounding rays is the whole workspace, so its
        polygon is the corner loop without the base point.
        """
        if self.start_ray is None:
            return Polygon2D(self.boundary[1:])
        return Polygon2D(self.boundary)

    def area(self) -> float:
        return self.polygon.area()

    def contains(self, point: Point2D) -> bool:
        """Whether ``point`` is inside the sector or on its boundary."""
        return self.polygon.bounded_side(point) != Side.OUTSIDE

    def to_array(self) -> np.ndarray:
        return self.polygon.to_array()

    def to_dict(self) -> Dict:
        return {
            "index": self.index,
            "start_ray": self.start_ray,
            "end_ray": self.end_ray,
            "boundary": [list(p.to_tuple()) for p in self.boundary],
        }


def corners_between(
    corner_rays: Sequence[Segment2D],
    start: Direction2D,
    end: Direction2D,
) -> List[Point2D]:
    """Corners strictly inside the counter-clockwise sweep from ``start`` to ``end``.

    ``corner_rays`` must be sorted by direction. Corners are returned in
    counter-clockwise order beginning at ``start``.
    """
    inside = [
        ray for ray in corner_rays
        if ray.direction().counterclockwise_in_between(start, end)
    ]
    after_start = [ray for ray in inside if start < ray.direction()]
    wrapped = [ray for ray in inside if not start < ray.direction()]
    return [ray.target for ray in after_start + wrapped]


@timed
def assemble_regions(
    base_point: Point2D,
    rays: Sequence[RaySubdivision],
    corner_rays: Sequence[Segment2D],
) -> Tuple[Region, ...]:
    """Build one region per pair of angularly adjacent rays.

    With no rays the whole workspace is a single region made of the base
    point and the four corners.

    Args:
        base_point: Common apex of all rays.
        rays: Rays sorted by direction.
        corner_rays: Base point to corner segments sorted by direction.
    """
    if not rays:
        boundary = (base_point,) + tuple(ray.target for ray in corner_rays)
        return (Region(0, boundary),)

    regions = []
    count = len(rays)
    for i in range(count):
        j = (i + 1) % count
        first, second = rays[i], rays[j]
        boundary = [base_point, first.endpoint]
        boundary.extend(corners_between(corner_rays, first.direction, second.direction))
        boundary.append(second.endpoint)
        regions.append(Region(i, tuple(boundary), i, j))
    return tuple(regions)
