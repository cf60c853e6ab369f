"""
Base point selection.

The base point is the apex of every classification ray. It must lie
outside all obstacles and off every line through two key points; a point on
such a line would make one obstacle's away ray coincide with another
obstacle's toward ray.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from homotopy.exceptions import DegenerateBasePointError, InvalidBasePointError
from homotopy.geometry import Line2D, Point2D
from homotopy.logging import get_logger
from homotopy.obstacle import Obstacle
from homotopy.workspace import Workspace

logger = get_logger("base_point")


@dataclass(frozen=True)
class BasePointSelection:
    """
    Result of the base point search.

    Attributes:
        point: Selected base point
        attempts: Number of candidates tested (0 for a caller-supplied point)
    """
    point: Point2D
    attempts: int


def key_point_lines(key_points: Sequence[Point2D]) -> List[Line2D]:
    """Lines through every pair of distinct key points."""
    lines = []
    for i in range(len(key_points)):
        for j in range(i + 1, len(key_points)):
            if key_points[i] == key_points[j]:
                logger.warning(
                    f"Key points of obstacles {i} and {j} coincide at {key_points[i]}; "
                    f"no separating line exists"
                )
                continue
            lines.append(Line2D(key_points[i], key_points[j]))
    return lines


def is_in_obstacle(point: Point2D, obstacles: Sequence[Obstacle]) -> bool:
    """Whether ``point`` is inside or on the border of any obstacle."""
    return any(obstacle.contains(point) for obstacle in obstacles)


def is_on_key_point_line(point: Point2D, lines: Sequence[Line2D]) -> bool:
    return any(line.has_on(point) for line in lines)


def is_valid_base_point(
    point: Point2D,
    workspace: Workspace,
    obstacles: Sequence[Obstacle],
    lines: Sequence[Line2D],
) -> bool:
    return (
        workspace.strictly_contains(point)
        and not is_in_obstacle(point, obstacles)
        and not is_on_key_point_line(point, lines)
    )


def select_base_point(
    workspace: Workspace,
    obstacles: Sequence[Obstacle],
    key_points: Sequence[Point2D],
    rng: Optional[np.random.Generator] = None,
    max_attempts: int = 10000,
    window_fraction: float = 0.2,
) -> BasePointSelection:
    """Search for a valid base point.

    The workspace centre is tried first. Later candidates are drawn
    uniformly from a window centred on the workspace centre whose sides are
    ``window_fraction`` of the workspace width and height.

    Args:
        workspace: Workspace rectangle.
        obstacles: Obstacles in index order.
        key_points: Key point of each obstacle.
        rng: Random generator for resampling.
        max_attempts: Total number of candidates to test.
        window_fraction: Relative size of the sampling window.

    Returns:
        The selected point and the number of candidates tested.

    Raises:
        DegenerateBasePointError: If no candidate was valid.
    """
    if rng is None:
        rng = np.random.default_rng()

    lines = key_point_lines(key_points)
    center = workspace.center()
    half_w = workspace.width * window_fraction / 2
    half_h = workspace.height * window_fraction / 2
    cx, cy = float(center.x), float(center.y)

    candidate = center
    for attempt in range(1, max_attempts + 1):
        if is_valid_base_point(candidate, workspace, obstacles, lines):
            logger.info(f"Selected base point {candidate.to_tuple()} after {attempt} attempt(s)")
            return BasePointSelection(candidate, attempt)
        logger.debug(f"Rejected base point candidate {candidate.to_tuple()}")
        candidate = Point2D(
            rng.uniform(cx - half_w, cx + half_w),
            rng.uniform(cy - half_h, cy + half_h),
        )

    raise DegenerateBasePointError(max_attempts)


def check_base_point(
    point: Point2D,
    workspace: Workspace,
    obstacles: Sequence[Obstacle],
) -> BasePointSelection:
    """Accept a caller-supplied base point.

    The point must be strictly inside the workspace and outside every
    obstacle. Key point collinearity is not checked; it surfaces in the
    angular sort as a ray ordering degeneracy.

    Raises:
        InvalidBasePointError: If the point violates either condition.
    """
    if not workspace.strictly_contains(point):
        raise InvalidBasePointError(point, "not strictly inside the workspace")
    for obstacle in obstacles:
        if obstacle.contains(point):
            raise InvalidBasePointError(point, f"inside obstacle {obstacle.index}")
    return BasePointSelection(point, 0)
