"""
Tests for the decomposition pipeline.
"""

from __future__ import annotations

import json
from fractions import Fraction

import pytest

from homotopy.base_point import key_point_lines
from homotopy.config import DecompositionConfig, SamplingConfig, SearchConfig
from homotopy.decomposer import Decomposition, WorkspaceDecomposer, decompose
from homotopy.exceptions import (
    ConfigValidationError,
    DegenerateBasePointError,
    DegenerateRayOrderingError,
    InvalidBasePointError,
    InvalidObstacleError,
    InvalidWorkspaceError,
)
from homotopy.geometry import Point2D
from homotopy.ray_subdivision import RayKind


class TestTwoObstacleScenario:
    """Fixed base point and key points on a 100 x 100 workspace."""

    def test_ray_and_region_counts(self, two_obstacle_decomposition):
        """Should produce one toward and one away ray per obstacle and one region per ray."""
        assert len(two_obstacle_decomposition.rays) == 4
        assert len(two_obstacle_decomposition.regions) == 4

    def test_ray_order(self, two_obstacle_decomposition):
        """Should order rays counter-clockwise from the +x axis."""
        names = [ray.name for ray in two_obstacle_decomposition.rays]
        assert names == ["away[1]", "toward[0]", "toward[1]", "away[0]"]

    def test_base_point_attempts(self, two_obstacle_decomposition):
        """A fixed base point should need no search attempts."""
        assert two_obstacle_decomposition.base_point_attempts == 0

    def test_rays_for(self, two_obstacle_decomposition):
        """Should return the away and toward rays of an obstacle with exact endpoints."""
        away, toward = two_obstacle_decomposition.rays_for(0)
        assert away.kind == RayKind.AWAY
        assert toward.kind == RayKind.TOWARD
        assert toward.endpoint == Point2D(0, Fraction(2970, 59))
        assert [c.point for c in away.crossings] == [
            Point2D(70, Fraction(2900, 59)),
            Point2D(90, Fraction(2880, 59)),
        ]

    def test_rays_for_unknown_obstacle(self, two_obstacle_decomposition):
        """Should raise KeyError for an obstacle index that does not exist."""
        with pytest.raises(KeyError):
            two_obstacle_decomposition.rays_for(5)

    def test_toward_rays_have_no_crossings(self, two_obstacle_decomposition):
        """Toward rays should not cross any other obstacle here."""
        for index in (0, 1):
            _, toward = two_obstacle_decomposition.rays_for(index)
            assert toward.crossings == ()

    def test_key_point_distance(self, two_obstacle_decomposition):
        """Should report the distance from the base point to the key point."""
        assert two_obstacle_decomposition.key_point_distance(0) == pytest.approx((29.5 ** 2 + 0.25) ** 0.5)

    def test_locate(self, two_obstacle_decomposition):
        """Should find the region holding a point."""
        assert two_obstacle_decomposition.locate((50, 90)) == 3
        assert two_obstacle_decomposition.locate((50, 10)) == 1
        assert two_obstacle_decomposition.locate((5, 53)) == 0
        assert two_obstacle_decomposition.locate((95, 45)) == 2

    def test_locate_outside_workspace(self, two_obstacle_decomposition):
        """Should return None for a point outside the workspace."""
        assert two_obstacle_decomposition.locate((120, 10)) is None

    def test_to_dict_is_json_serializable(self, two_obstacle_decomposition):
        """Should export a JSON-serializable summary."""
        data = json.loads(json.dumps(two_obstacle_decomposition.to_dict()))
        assert data["width"] == 100
        assert len(data["rays"]) == 4
        assert len(data["regions"]) == 4
        assert data["base_point"] == [49.5, 49.5]

    def test_boundary_edges(self, two_obstacle_decomposition):
        """Should expose the four workspace edges."""
        assert len(two_obstacle_decomposition.boundary_edges) == 4


class TestDecompositionProperties:
    """Structural properties that hold for every decomposition."""

    @pytest.fixture
    def random_decomposition(self, two_obstacles):
        return decompose(100, 100, two_obstacles, config=DecompositionConfig(seed=11))

    def test_one_region_per_ray(self, random_decomposition):
        """Should build as many regions as rays."""
        assert len(random_decomposition.regions) == len(random_decomposition.rays)

    def test_consecutive_regions_share_rays(self, random_decomposition):
        """Adjacent regions should share their bounding ray."""
        rays = random_decomposition.rays
        regions = random_decomposition.regions
        for i, region in enumerate(regions):
            following = regions[(i + 1) % len(regions)]
            assert region.end_ray == following.start_ray
            assert region.boundary[-1] == rays[region.end_ray].endpoint
            assert following.boundary[1] == rays[following.start_ray].endpoint

    def test_base_point_is_valid(self, random_decomposition):
        """Should choose a base point off obstacles and key point lines."""
        base = random_decomposition.base_point
        assert random_decomposition.workspace.strictly_contains(base)
        for obstacle in random_decomposition.obstacles:
            assert not obstacle.contains(base)
        for line in key_point_lines(random_decomposition.key_points):
            assert not line.has_on(base)

    def test_key_points_strictly_inside(self, random_decomposition):
        """Sampled key points should lie strictly inside their obstacle."""
        for obstacle, point in zip(random_decomposition.obstacles, random_decomposition.key_points):
            assert obstacle.strictly_contains(point)

    def test_crossings_strictly_increasing(self, random_decomposition):
        """Crossings should be strictly ordered by distance."""
        for ray in random_decomposition.rays:
            distances = [c.squared_distance for c in ray.crossings]
            assert distances == sorted(set(distances))

    def test_rays_strictly_ordered(self, random_decomposition):
        """Rays should be strictly ordered by direction."""
        rays = random_decomposition.rays
        for first, second in zip(rays, rays[1:]):
            assert first.direction < second.direction

    def test_regions_cover_workspace(self, random_decomposition):
        """Region areas should add up to the workspace area."""
        total = sum(region.area() for region in random_decomposition.regions)
        assert total == pytest.approx(99 * 99)

    def test_seeded_runs_agree(self, two_obstacles):
        """Runs with the same seed should give the same decomposition."""
        config = DecompositionConfig(seed=11)
        first = decompose(100, 100, two_obstacles, config=config)
        second = decompose(100, 100, two_obstacles, config=config)
        assert first.base_point == second.base_point
        assert first.key_points == second.key_points
        assert first.rays == second.rays
        assert first.regions == second.regions

    def test_fixed_inputs_are_idempotent(self, two_obstacles, two_key_points, center_base_point):
        """Repeating a run with fixed inputs should give the same rays and regions."""
        decomposer = WorkspaceDecomposer(100, 100)
        decomposer.load_obstacles(two_obstacles)
        first = decomposer.decompose(base_point=center_base_point, key_points=two_key_points)
        second = decomposer.decompose(base_point=center_base_point, key_points=two_key_points)
        assert first.rays == second.rays
        assert first.regions == second.regions


class TestEdgeCases:
    """Degenerate and boundary inputs."""

    def test_no_obstacles(self, no_obstacles):
        """Should build a single region over the whole workspace without obstacles."""
        result = decompose(100, 100, no_obstacles, config=DecompositionConfig(seed=0))
        assert result.rays == ()
        assert len(result.regions) == 1
        region = result.regions[0]
        assert region.boundary[0] == result.base_point
        assert set(region.boundary[1:]) == {
            Point2D(0, 0), Point2D(99, 0), Point2D(99, 99), Point2D(0, 99),
        }
        assert result.locate((1, 1)) == 0

    def test_no_obstacles_locates_every_wedge(self, no_obstacles):
        """Should place points on all four sides of the base point in the single region."""
        result = decompose(100, 100, no_obstacles, config=DecompositionConfig(seed=0))
        for point in ((95, 50), (50, 95), (5, 50), (50, 5)):
            assert result.locate(point) == 0
        assert result.regions[0].area() == pytest.approx(99 * 99)

    def test_collinear_rays(self, two_obstacles):
        """Should raise when the base point is collinear with two key points."""
        with pytest.raises(DegenerateRayOrderingError):
            decompose(
                100, 100, two_obstacles,
                base_point=(Fraction(99, 2), 50),
                key_points=[(20, 50), (80, 50)],
            )

    def test_base_point_inside_obstacle(self, two_obstacles, two_key_points):
        """Should reject a fixed base point inside an obstacle."""
        with pytest.raises(InvalidBasePointError):
            decompose(100, 100, two_obstacles, base_point=(20, 45), key_points=two_key_points)

    def test_key_point_outside_obstacle(self, two_obstacles):
        """Should reject a key point outside its obstacle."""
        with pytest.raises(InvalidObstacleError) as excinfo:
            decompose(100, 100, two_obstacles, key_points=[(20, 50), (50, 50)])
        assert excinfo.value.details["obstacle_id"] == 1

    def test_key_point_on_border(self, two_obstacles):
        """Should reject a key point on its obstacle's border."""
        with pytest.raises(InvalidObstacleError):
            decompose(100, 100, two_obstacles, key_points=[(10, 50), (80, 45)])

    def test_wrong_key_point_count(self, two_obstacles):
        """Should reject a key point list of the wrong length."""
        with pytest.raises(InvalidObstacleError):
            decompose(100, 100, two_obstacles, key_points=[(20, 50)])

    def test_base_point_search_exhausted(self):
        """Should raise once the base point search budget is spent."""
        config = DecompositionConfig(search=SearchConfig(max_attempts=3), seed=0)
        with pytest.raises(DegenerateBasePointError):
            decompose(100, 100, [[(30, 30), (70, 30), (70, 70), (30, 70)]], config=config)

    def test_invalid_workspace(self):
        """Should reject a workspace narrower than two cells."""
        with pytest.raises(InvalidWorkspaceError):
            WorkspaceDecomposer(1, 100)

    def test_invalid_config_rejected(self):
        """Should validate the configuration on construction."""
        with pytest.raises(ConfigValidationError):
            WorkspaceDecomposer(100, 100, DecompositionConfig(sampling=SamplingConfig(strategy="x")))

    def test_interior_strategy(self, two_obstacles):
        """The interior strategy should use each obstacle's exact interior point."""
        config = DecompositionConfig(sampling=SamplingConfig(strategy="interior"), seed=1)
        decomposer = WorkspaceDecomposer(100, 100, config)
        obstacles = decomposer.load_obstacles(two_obstacles)
        result = decomposer.decompose()
        assert result.key_points == tuple(o.interior_point() for o in obstacles)


class TestWorkspaceDecomposer:
    """Tests for the decomposer object."""

    def test_phases_can_run_separately(self, two_obstacles, two_key_points, center_base_point):
        """Should allow running each phase on its own."""
        decomposer = WorkspaceDecomposer(100, 100)
        decomposer.load_obstacles(two_obstacles)
        keys = decomposer.check_key_points(two_key_points)
        corner_rays, rays = decomposer.build_rays(center_base_point, keys)
        assert len(corner_rays) == 4
        assert all(ray.crossings == () for ray in rays)
        subdivided = decomposer.subdivide(rays)
        assert sum(len(ray.crossings) for ray in subdivided) == 4

    def test_load_obstacles_replaces(self, two_obstacles, left_square):
        """Loading obstacles again should replace the previous set."""
        decomposer = WorkspaceDecomposer(100, 100)
        decomposer.load_obstacles(two_obstacles)
        decomposer.load_obstacles([left_square])
        assert len(decomposer.obstacles) == 1

    def test_str(self, two_obstacles):
        """Should describe the workspace size and obstacles."""
        decomposer = WorkspaceDecomposer(100, 80)
        decomposer.load_obstacles(two_obstacles)
        text = str(decomposer)
        assert text.startswith("Size[100*80]")
        assert text.count("Obstacle(") == 2

    def test_result_type(self, two_obstacles):
        """Should return a Decomposition."""
        decomposer = WorkspaceDecomposer(100, 100, DecompositionConfig(seed=4))
        decomposer.load_obstacles(two_obstacles)
        assert isinstance(decomposer.decompose(), Decomposition)
