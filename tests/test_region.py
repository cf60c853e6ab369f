"""
Tests for region assembly.
"""

from __future__ import annotations

from fractions import Fraction

import pytest

from homotopy.geometry import Direction2D, Point2D
from homotopy.ray_subdivision import build_corner_rays
from homotopy.region import Region, assemble_regions, corners_between


class TestCornersBetween:
    """Tests for corners_between."""

    @pytest.fixture
    def corner_rays(self, workspace, center_base_point):
        return build_corner_rays(workspace, center_base_point)

    def test_no_corner(self, corner_rays):
        assert corners_between(corner_rays, Direction2D(1, 0), Direction2D(1, 1)) == []

    def test_single_corner(self, corner_rays):
        assert corners_between(corner_rays, Direction2D(1, 0), Direction2D(0, 1)) == [Point2D(99, 99)]

    def test_wrapping_sweep_is_ordered_from_start(self, corner_rays):
        """Sweep from 300 degrees to 150 degrees passes 315, 45 and 135."""
        start = Direction2D(1, -2)
        end = Direction2D(-2, 1)
        assert corners_between(corner_rays, start, end) == [
            Point2D(99, 0), Point2D(99, 99), Point2D(0, 99),
        ]

    def test_corner_on_ray_excluded(self, corner_rays):
        assert corners_between(corner_rays, Direction2D(1, 1), Direction2D(-1, 1)) == []


class TestAssembleRegions:
    """Tests for assemble_regions."""

    def test_no_rays(self, workspace, center_base_point):
        corner_rays = build_corner_rays(workspace, center_base_point)
        (region,) = assemble_regions(center_base_point, (), corner_rays)
        assert region.boundary == (
            center_base_point, Point2D(99, 99), Point2D(0, 99), Point2D(0, 0), Point2D(99, 0),
        )
        assert region.start_ray is None
        assert region.area() == pytest.approx(99 * 99)

    def test_no_rays_region_contains_every_wedge(self, workspace, center_base_point):
        """Should cover the whole rectangle, including the wedge between the last and first corner."""
        corner_rays = build_corner_rays(workspace, center_base_point)
        (region,) = assemble_regions(center_base_point, (), corner_rays)
        for point in (Point2D(95, 50), Point2D(50, 95), Point2D(5, 50), Point2D(50, 5)):
            assert region.contains(point)

    def test_regions_from_decomposition(self, two_obstacle_decomposition):
        regions = two_obstacle_decomposition.regions
        base = two_obstacle_decomposition.base_point
        assert regions[0].boundary == (
            base, Point2D(0, Fraction(3465, 61)), Point2D(0, Fraction(2970, 59)),
        )
        assert regions[1].boundary == (
            base, Point2D(0, Fraction(2970, 59)), Point2D(0, 0), Point2D(99, 0),
            Point2D(99, Fraction(2574, 61)),
        )
        assert regions[2].boundary == (
            base, Point2D(99, Fraction(2574, 61)), Point2D(99, Fraction(2871, 59)),
        )
        assert regions[3].boundary == (
            base, Point2D(99, Fraction(2871, 59)), Point2D(99, 99), Point2D(0, 99),
            Point2D(0, Fraction(3465, 61)),
        )

    def test_ray_indices(self, two_obstacle_decomposition):
        pairs = [(r.start_ray, r.end_ray) for r in two_obstacle_decomposition.regions]
        assert pairs == [(0, 1), (1, 2), (2, 3), (3, 0)]


class TestRegion:
    """Tests for the Region value type."""

    @pytest.fixture
    def triangle_region(self):
        return Region(0, (Point2D(0, 0), Point2D(4, 0), Point2D(0, 4)), 0, 1)

    def test_base_point(self, triangle_region):
        assert triangle_region.base_point == Point2D(0, 0)

    def test_contains(self, triangle_region):
        assert triangle_region.contains(Point2D(1, 1))
        assert triangle_region.contains(Point2D(2, 2))
        assert not triangle_region.contains(Point2D(3, 3))

    def test_to_dict(self, triangle_region):
        d = triangle_region.to_dict()
        assert d["index"] == 0
        assert d["boundary"][1] == [4.0, 0.0]

    def test_to_array(self, triangle_region):
        assert triangle_region.to_array().shape == (3, 2)
