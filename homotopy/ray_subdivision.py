"""
Obstacle rays and their subdivision by obstacle borders.

Every obstacle contributes two rays from the base point: the toward ray
runs through the obstacle's key point, the away ray runs in the opposite
direction. A ray is stored as the segment from the key point to the point
where the ray leaves the workspace; the away segment therefore passes
through the base point. The points where other obstacles' borders cross the
segment, ordered by distance from the key point, split it into the string
of pieces a planner labels when it computes a path's homotopy signature.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from homotopy.exceptions import DegenerateRayOrderingError, MissingBoundaryIntersectionError
from homotopy.geometry import Direction2D, Point2D, Ray2D, Segment2D
from homotopy.logging import get_logger
from homotopy.obstacle import Obstacle
from homotopy.workspace import Workspace

logger = get_logger("rays")


class RayKind(Enum):
    """Which side of the base point a ray leaves towards."""
    TOWARD = "toward"
    AWAY = "away"


@dataclass(frozen=True)
class Crossing:
    """
    Point where an obstacle border crosses a ray segment.

    Attributes:
        point: Crossing location
        squared_distance: Exact squared distance from the ray's key point
        distance: Distance from the ray's key point
        obstacle_index: Index of the crossed obstacle
    """
    point: Point2D
    squared_distance: Fraction
    distance: float
    obstacle_index: int


@dataclass(frozen=True)
class RaySubdivision:
    """
    One obstacle ray with its ordered border crossings.

    Attributes:
        obstacle_index: Index of the owning obstacle
        kind: Toward or away ray
        base_point: Apex of the ray
        key_point: Key point of the owning obstacle
        endpoint: Intersection of the ray with the workspace boundary
        crossings: Border crossings, strictly increasing in distance from
            the key point
    """
    obstacle_index: int
    kind: RayKind
    base_point: Point2D
    key_point: Point2D
    endpoint: Point2D
    crossings: Tuple[Crossing, ...] = ()

    def __post_init__(self):
        for previous, current in zip(self.crossings, self.crossings[1:]):
            if not previous.squared_distance < current.squared_distance:
                raise ValueError(
                    f"Crossings of ray {self.name} are not strictly increasing in distance"
                )

    @property
    def name(self) -> str:
        return f"{self.kind.value}[{self.obstacle_index}]"

    @property
    def segment(self) -> Segment2D:
        """Segment from the key point to the boundary endpoint."""
        return Segment2D(self.key_point, self.endpoint)

    @property
    def direction(self) -> Direction2D:
        """Direction of the ray as seen from the base point."""
        return Direction2D.between(self.base_point, self.endpoint)

    def with_crossings(self, crossings: Sequence[Crossing]) -> "RaySubdivision":
        return replace(self, crossings=tuple(crossings))

    def points(self) -> List[Point2D]:
        """Key point, crossings in order, then the boundary endpoint."""
        return [self.key_point] + [c.point for c in self.crossings] + [self.endpoint]

    def sub_segments(self) -> List[Segment2D]:
        """Pieces of the ray segment between consecutive crossings."""
        points = self.points()
        return [
            Segment2D(a, b) for a, b in zip(points, points[1:]) if a != b
        ]

    def to_array(self) -> np.ndarray:
        """Segment endpoints as a (2, 2) float array [key point, endpoint]."""
        return np.array([self.key_point.to_tuple(), self.endpoint.to_tuple()])

    def to_dict(self) -> Dict:
        return {
            "obstacle": self.obstacle_index,
            "kind": self.kind.value,
            "key_point": list(self.key_point.to_tuple()),
            "endpoint": list(self.endpoint.to_tuple()),
            "angle": self.direction.angle(),
            "crossings": [
                {
                    "point": list(c.point.to_tuple()),
                    "distance": c.distance,
                    "obstacle": c.obstacle_index,
                }
                for c in self.crossings
            ],
        }


# =============================================================================
# Ray Construction
# =============================================================================


def find_boundary_intersection(workspace: Workspace, ray: Ray2D) -> Optional[Point2D]:
    """First point where ``ray`` meets a workspace boundary edge.

    A ray through a corner meets two edges at the same point; either is
    returned.
    """
    for edge in workspace.boundary_edges():
        hit = ray.intersection(edge)
        if isinstance(hit, Point2D):
            return hit
    return None


def build_corner_rays(workspace: Workspace, base_point: Point2D) -> Tuple[Segment2D, ...]:
    """Segments from the base point to each workspace corner, sorted by direction."""
    rays = [Segment2D(base_point, corner) for corner in workspace.corners()]
    return tuple(sorted(rays, key=lambda segment: segment.direction()))


def build_obstacle_rays(
    workspace: Workspace,
    base_point: Point2D,
    obstacles: Sequence[Obstacle],
    key_points: Sequence[Point2D],
) -> List[RaySubdivision]:
    """Away and toward rays of every obstacle, in obstacle order.

    Raises:
        MissingBoundaryIntersectionError: If a ray misses the boundary.
    """
    rays = []
    for obstacle in obstacles:
        key_point = key_points[obstacle.index]
        if key_point == base_point:
            raise DegenerateRayOrderingError(
                f"{RayKind.AWAY.value}[{obstacle.index}]",
                f"{RayKind.TOWARD.value}[{obstacle.index}]",
            )
        for kind, through in (
            (RayKind.AWAY, key_point.reflected_through(base_point)),
            (RayKind.TOWARD, key_point),
        ):
            endpoint = find_boundary_intersection(workspace, Ray2D.through(base_point, through))
            if endpoint is None:
                raise MissingBoundaryIntersectionError(obstacle.index, kind.value)
            rays.append(RaySubdivision(obstacle.index, kind, base_point, key_point, endpoint))
    return rays


def sort_rays(rays: Sequence[RaySubdivision]) -> Tuple[RaySubdivision, ...]:
    """Sort rays counter-clockwise by direction from the base point.

    Raises:
        DegenerateRayOrderingError: If two rays share a direction.
    """
    ordered = sorted(rays, key=lambda ray: ray.direction)
    for first, second in zip(ordered, ordered[1:]):
        if first.direction == second.direction:
            raise DegenerateRayOrderingError(first.name, second.name)
    return tuple(ordered)


# =============================================================================
# Subdivision
# =============================================================================


def compute_crossings(ray: RaySubdivision, obstacles: Sequence[Obstacle]) -> Tuple[Crossing, ...]:
    """Border crossings of ``ray`` with every obstacle except its owner.

    A border edge that overlaps the ray segment contributes both ends of the
    overlap. Points shared by two edges (polygon vertices) are kept once.
    """
    segment = ray.segment
    found: Dict[Point2D, int] = {}
    for obstacle in obstacles:
        if obstacle.index == ray.obstacle_index:
            continue
        for border in obstacle.border_segments:
            hit = segment.intersection(border)
            if hit is None:
                continue
            points = (hit,) if isinstance(hit, Point2D) else (hit.source, hit.target)
            for point in points:
                found.setdefault(point, obstacle.index)

    crossings = []
    for point, obstacle_index in found.items():
        squared = ray.key_point.squared_distance(point)
        crossings.append(Crossing(point, squared, math.sqrt(squared), obstacle_index))
    crossings.sort(key=lambda c: c.squared_distance)
    return tuple(crossings)


def subdivide_rays(
    rays: Sequence[RaySubdivision],
    obstacles: Sequence[Obstacle],
) -> Tuple[RaySubdivision, ...]:
    """Attach ordered crossings to every ray, preserving ray order."""
    subdivided = []
    for ray in rays:
        crossings = compute_crossings(ray, obstacles)
        logger.debug(f"Ray {ray.name} has {len(crossings)} crossing(s)")
        subdivided.append(ray.with_crossings(crossings))
    return tuple(subdivided)
