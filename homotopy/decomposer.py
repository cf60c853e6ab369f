"""
Homotopy-aware workspace decomposition.

The decomposer runs a fixed sequence of phases, each consuming the complete
output of the previous one:

1. key points     - one representative interior point per obstacle
2. base point     - apex outside all obstacles and key point lines
3. rays           - away and toward ray per obstacle, clipped at the boundary
4. angular sort   - strict counter-clockwise order of all rays
5. subdivision    - ordered border crossings along every ray
6. regions        - one sector per pair of adjacent rays

Every phase returns immutable values, so each can be run and tested on its
own; ``WorkspaceDecomposer.decompose`` threads them together into a
``Decomposition``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from homotopy.base_point import BasePointSelection, check_base_point, select_base_point
from homotopy.config import DecompositionConfig
from homotopy.exceptions import InvalidObstacleError
from homotopy.geometry import Point2D, Scalar, Segment2D
from homotopy.logging import get_logger, profile_scope
from homotopy.obstacle import Obstacle, PointLike, load_obstacles, sample_key_points
from homotopy.ray_subdivision import (
    RayKind,
    RaySubdivision,
    build_corner_rays,
    build_obstacle_rays,
    sort_rays,
    subdivide_rays,
)
from homotopy.region import Region, assemble_regions
from homotopy.workspace import Workspace

logger = get_logger("decomposer")


@dataclass(frozen=True)
class Decomposition:
    """
    Complete output of one decomposition run.

    Attributes:
        workspace: Workspace rectangle
        base_point: Apex of all rays
        obstacles: Obstacles in index order
        key_points: Key point of each obstacle, indexed like ``obstacles``
        corner_rays: Base point to corner segments, sorted by direction
        rays: All obstacle rays with crossings, sorted by direction
        regions: Sectors in angular order, ``regions[i]`` lies between
            ``rays[i]`` and ``rays[i + 1]``
        base_point_attempts: Candidates tested by the base point search
    """
    workspace: Workspace
    base_point: Point2D
    obstacles: Tuple[Obstacle, ...]
    key_points: Tuple[Point2D, ...]
    corner_rays: Tuple[Segment2D, ...]
    rays: Tuple[RaySubdivision, ...]
    regions: Tuple[Region, ...]
    base_point_attempts: int = 0

    @property
    def boundary_edges(self) -> Tuple[Segment2D, ...]:
        return self.workspace.boundary_edges()

    def key_point_distance(self, obstacle_index: int) -> float:
        """Distance from an obstacle's key point to the base point."""
        return self.key_points[obstacle_index].distance(self.base_point)

    def rays_for(self, obstacle_index: int) -> Tuple[RaySubdivision, RaySubdivision]:
        """The (away, toward) rays of an obstacle."""
        found = {
            ray.kind: ray for ray in self.rays if ray.obstacle_index == obstacle_index
        }
        if len(found) != 2:
            raise KeyError(f"No rays for obstacle {obstacle_index}")
        return found[RayKind.AWAY], found[RayKind.TOWARD]

    def ray_index(self, ray: RaySubdivision) -> int:
        """Position of ``ray`` in angular order."""
        return self.rays.index(ray)

    def locate(self, point: Union[Point2D, Sequence[Scalar]]) -> Optional[int]:
        """Index of the first region (in angular order) containing ``point``."""
        point = Point2D.of(point)
        if not self.workspace.contains(point):
            return None
        for region in self.regions:
            if region.contains(point):
                return region.index
        return None

    def to_dict(self) -> Dict:
        """JSON-ready summary with float coordinates."""
        return {
            "width": self.workspace.width,
            "height": self.workspace.height,
            "base_point": list(self.base_point.to_tuple()),
            "base_point_attempts": self.base_point_attempts,
            "obstacles": [
                {
                    "index": obstacle.index,
                    "vertices": obstacle.to_array().tolist(),
                    "key_point": list(self.key_points[obstacle.index].to_tuple()),
                    "key_point_distance": self.key_point_distance(obstacle.index),
                }
                for obstacle in self.obstacles
            ],
            "rays": [ray.to_dict() for ray in self.rays],
            "regions": [region.to_dict() for region in self.regions],
        }


class WorkspaceDecomposer:
    """
    Decomposes a rectangular workspace with polygonal obstacles into sectors.

    Example:
        decomposer = WorkspaceDecomposer(100, 100)
        decomposer.load_obstacles([[(10, 40), (30, 40), (30, 60), (10, 60)]])
        result = decomposer.decompose()
    """

    def __init__(
        self,
        width: int,
        height: int,
        config: Optional[DecompositionConfig] = None,
    ):
        self.workspace = Workspace(width, height)
        self.config = config or DecompositionConfig()
        self.config.validate()
        self.obstacles: List[Obstacle] = []
        self.rng = np.random.default_rng(self.config.seed)

    @property
    def width(self) -> int:
        return self.workspace.width

    @property
    def height(self) -> int:
        return self.workspace.height

    def load_obstacles(self, polygons: Iterable[Iterable[PointLike]]) -> List[Obstacle]:
        """Replace the obstacle set with polygons given as vertex lists."""
        self.obstacles = load_obstacles(polygons)
        return self.obstacles

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def sample_key_points(self) -> Tuple[Point2D, ...]:
        return sample_key_points(
            self.obstacles,
            self.rng,
            strategy=self.config.sampling.strategy,
            max_attempts=self.config.sampling.max_attempts,
        )

    def check_key_points(self, key_points: Sequence[Union[Point2D, Sequence[Scalar]]]) -> Tuple[Point2D, ...]:
        """Validate caller-supplied key points.

        Raises:
            InvalidObstacleError: If the count is wrong or a point is not
                strictly inside its obstacle.
        """
        points = tuple(Point2D.of(p) for p in key_points)
        if len(points) != len(self.obstacles):
            raise InvalidObstacleError(
                "*", f"expected {len(self.obstacles)} key points, got {len(points)}"
            )
        for obstacle, point in zip(self.obstacles, points):
            if not obstacle.strictly_contains(point):
                raise InvalidObstacleError(
                    obstacle.index, f"key point {point} is not strictly inside the polygon"
                )
        return points

    def select_base_point(self, key_points: Sequence[Point2D]) -> BasePointSelection:
        return select_base_point(
            self.workspace,
            self.obstacles,
            key_points,
            self.rng,
            max_attempts=self.config.search.max_attempts,
            window_fraction=self.config.search.window_fraction,
        )

    def build_rays(
        self,
        base_point: Point2D,
        key_points: Sequence[Point2D],
    ) -> Tuple[Tuple[Segment2D, ...], Tuple[RaySubdivision, ...]]:
        """Corner rays and angle-sorted obstacle rays (without crossings)."""
        corner_rays = build_corner_rays(self.workspace, base_point)
        rays = sort_rays(build_obstacle_rays(self.workspace, base_point, self.obstacles, key_points))
        return corner_rays, rays

    def subdivide(self, rays: Sequence[RaySubdivision]) -> Tuple[RaySubdivision, ...]:
        return subdivide_rays(rays, self.obstacles)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def decompose(
        self,
        base_point: Optional[Union[Point2D, Sequence[Scalar]]] = None,
        key_points: Optional[Sequence[Union[Point2D, Sequence[Scalar]]]] = None,
    ) -> Decomposition:
        """Run every phase and return the decomposition.

        Args:
            base_point: Fixed base point; skips the randomised search.
            key_points: Fixed key points, one per obstacle; skips sampling.

        Raises:
            DecompositionError: Subclass naming the obstacle or ray that
                triggered the failure.
        """
        logger.info(
            f"Decomposing {self.width}x{self.height} workspace with {len(self.obstacles)} obstacles"
        )

        with profile_scope("key point sampling"):
            if key_points is None:
                keys = self.sample_key_points()
            else:
                keys = self.check_key_points(key_points)

        with profile_scope("base point selection"):
            if base_point is None:
                selection = self.select_base_point(keys)
            else:
                selection = check_base_point(Point2D.of(base_point), self.workspace, self.obstacles)

        with profile_scope("ray construction"):
            corner_rays, rays = self.build_rays(selection.point, keys)

        with profile_scope("ray subdivision"):
            rays = self.subdivide(rays)

        with profile_scope("region assembly"):
            regions = assemble_regions(selection.point, rays, corner_rays)

        logger.info(f"Decomposition has {len(rays)} rays and {len(regions)} regions")

        return Decomposition(
            workspace=self.workspace,
            base_point=selection.point,
            obstacles=tuple(self.obstacles),
            key_points=keys,
            corner_rays=corner_rays,
            rays=rays,
            regions=regions,
            base_point_attempts=selection.attempts,
        )

    def __str__(self) -> str:
        lines = [f"Size[{self.width}*{self.height}]"]
        lines.extend(repr(obstacle) for obstacle in self.obstacles)
        return "\n".join(lines)


def decompose(
    width: int,
    height: int,
    polygons: Iterable[Iterable[PointLike]],
    config: Optional[DecompositionConfig] = None,
    base_point: Optional[Union[Point2D, Sequence[Scalar]]] = None,
    key_points: Optional[Sequence[Union[Point2D, Sequence[Scalar]]]] = None,
) -> Decomposition:
    """One-shot decomposition of a workspace given as raw polygons."""
    decomposer = WorkspaceDecomposer(width, height, config)
    decomposer.load_obstacles(polygons)
    return decomposer.decompose(base_point=base_point, key_points=key_points)
