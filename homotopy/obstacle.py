"""
Polygonal obstacles and key point sampling.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from homotopy.exceptions import InvalidObstacleError, KeyPointSamplingError
from homotopy.geometry import Point2D, Polygon2D, Scalar, Segment2D, Side
from homotopy.logging import get_logger

logger = get_logger("obstacle")

PointLike = Union[Point2D, Sequence[Scalar]]


class Obstacle:
    """
    Simple polygon obstacle.

    Obstacles are identified by their index in the owning decomposer's
    obstacle list; rays and regions refer to them by that index only.

    Attributes:
        index: Stable identifier of the obstacle
        polygon: Boundary polygon
        border_segments: Polygon edges
    """

    def __init__(self, vertices: Iterable[PointLike], index: int = 0):
        self.index = index
        try:
            self.polygon = Polygon2D(vertices)
        except (TypeError, ValueError) as e:
            raise InvalidObstacleError(index, f"bad vertex data: {e}") from e

        if len(self.polygon) < 3:
            raise InvalidObstacleError(index, f"needs at least 3 vertices, got {len(self.polygon)}")
        if self.polygon.signed_area() == 0:
            raise InvalidObstacleError(index, "polygon has zero area")
        if not self.polygon.is_simple():
            raise InvalidObstacleError(index, "polygon is not simple")

        self.border_segments: Tuple[Segment2D, ...] = self.polygon.edges

    @property
    def vertices(self) -> Tuple[Point2D, ...]:
        return self.polygon.vertices

    def bounded_side(self, point: Point2D) -> Side:
        return self.polygon.bounded_side(point)

    def contains(self, point: Point2D) -> bool:
        """Whether ``point`` is inside the obstacle or on its border."""
        return self.polygon.bounded_side(point) != Side.OUTSIDE

    def strictly_contains(self, point: Point2D) -> bool:
        return self.polygon.bounded_side(point) == Side.INSIDE

    def distance_to(self, point: Point2D) -> float:
        """Distance from ``point`` to the obstacle (0 inside or on the border)."""
        if self.contains(point):
            return 0.0
        return math.sqrt(self.polygon.squared_distance_to(point))

    def interior_point(self) -> Point2D:
        """Deterministic point strictly inside the obstacle."""
        return self.polygon.interior_point()

    def sample_key_point(self, rng: np.random.Generator, max_attempts: int = 1000) -> Point2D:
        """Sample a key point uniformly from the obstacle's interior.

        Candidates are drawn uniformly from the bounding box and rejected
        until one lies strictly inside the polygon.

        Args:
            rng: Random generator.
            max_attempts: Number of candidates to draw before giving up.

        Returns:
            Point strictly inside the polygon.

        Raises:
            KeyPointSamplingError: If no candidate was accepted.
        """
        x_min, y_min, x_max, y_max = (float(v) for v in self.polygon.bbox())
        for _ in range(max_attempts):
            candidate = Point2D(rng.uniform(x_min, x_max), rng.uniform(y_min, y_max))
            if self.strictly_contains(candidate):
                return candidate
        raise KeyPointSamplingError(self.index, max_attempts)

    def to_array(self) -> np.ndarray:
        return self.polygon.to_array()

    def __repr__(self) -> str:
        return f"Obstacle(index={self.index}, vertices={len(self.polygon)})"


def load_obstacles(polygons: Iterable[Iterable[PointLike]]) -> List[Obstacle]:
    """Build obstacles from vertex lists, indexed in input order."""
    obstacles = [Obstacle(points, index) for index, points in enumerate(polygons)]
    logger.debug(f"Loaded {len(obstacles)} obstacles")
    return obstacles


def sample_key_points(
    obstacles: Sequence[Obstacle],
    rng: Optional[np.random.Generator] = None,
    strategy: str = "random",
    max_attempts: int = 1000,
) -> Tuple[Point2D, ...]:
    """Pick one key point per obstacle.

    Args:
        obstacles: Obstacles in index order.
        rng: Random generator for the ``random`` strategy.
        strategy: ``random`` samples the interior uniformly and falls back
            to the exact interior point if sampling is exhausted;
            ``interior`` always uses the exact interior point.
        max_attempts: Rejection sampling budget per obstacle.

    Returns:
        Key points indexed like ``obstacles``.
    """
    if strategy not in ("random", "interior"):
        raise ValueError(f"Unknown key point strategy: {strategy}")
    if rng is None:
        rng = np.random.default_rng()

    key_points = []
    for obstacle in obstacles:
        if strategy == "interior":
            key_points.append(obstacle.interior_point())
            continue
        try:
            key_points.append(obstacle.sample_key_point(rng, max_attempts))
        except KeyPointSamplingError:
            logger.debug(f"Sampling exhausted for obstacle {obstacle.index}, using interior point")
            key_points.append(obstacle.interior_point())
    return tuple(key_points)
