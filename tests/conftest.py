"""
Pytest configuration and fixtures for homotopy tests.

This module provides shared fixtures for testing:
- Configuration fixtures
- Workspace fixtures
- Obstacle fixtures
- World document fixtures
"""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pytest


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config():
    """Create typed default configuration."""
    from homotopy.config import DecompositionConfig

    return DecompositionConfig()


@pytest.fixture
def seeded_config():
    """Configuration with a fixed seed."""
    from homotopy.config import DecompositionConfig

    return DecompositionConfig(seed=7)


@pytest.fixture
def rng() -> np.random.Generator:
    """Deterministic random generator."""
    return np.random.default_rng(42)


# =============================================================================
# Workspace Fixtures
# =============================================================================


@pytest.fixture
def workspace():
    """100 x 100 workspace."""
    from homotopy.workspace import Workspace

    return Workspace(100, 100)


@pytest.fixture
def center_base_point():
    """Centre of the 100 x 100 workspace."""
    from homotopy.geometry import Point2D

    return Point2D(Fraction(99, 2), Fraction(99, 2))


# =============================================================================
# Obstacle Fixtures
# =============================================================================


@pytest.fixture
def left_square() -> List[Tuple[int, int]]:
    """Square [10, 30] x [40, 60] left of the centre."""
    return [(10, 40), (30, 40), (30, 60), (10, 60)]


@pytest.fixture
def right_square() -> List[Tuple[int, int]]:
    """Square [70, 90] x [35, 55] right of the centre."""
    return [(70, 35), (90, 35), (90, 55), (70, 55)]


@pytest.fixture
def two_obstacles(left_square, right_square) -> List[List[Tuple[int, int]]]:
    """Two squares on either side of the workspace centre."""
    return [left_square, right_square]


@pytest.fixture
def two_key_points() -> List[Tuple[int, int]]:
    """Centres of the two squares."""
    return [(20, 50), (80, 45)]


@pytest.fixture
def loaded_obstacles(two_obstacles):
    """Two squares as Obstacle objects."""
    from homotopy.obstacle import load_obstacles

    return load_obstacles(two_obstacles)


@pytest.fixture
def triangle() -> List[Tuple[int, int]]:
    """Right triangle with legs along the axes."""
    return [(0, 0), (4, 0), (0, 4)]


@pytest.fixture
def no_obstacles() -> List:
    """Empty obstacle list."""
    return []


# =============================================================================
# Decomposition Fixtures
# =============================================================================


@pytest.fixture
def two_obstacle_decomposition(two_obstacles, two_key_points, center_base_point):
    """Decomposition of the two-square scenario with fixed inputs."""
    from homotopy.decomposer import decompose

    return decompose(
        100, 100, two_obstacles,
        base_point=center_base_point,
        key_points=two_key_points,
    )


# =============================================================================
# Temporary Files Fixtures
# =============================================================================


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    import yaml

    config = {
        "search": {
            "max_attempts": 500,
            "window_fraction": 0.5,
        },
        "sampling": {
            "strategy": "interior",
        },
        "seed": 3,
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path


@pytest.fixture
def temp_world_file(tmp_path, two_obstacles) -> Path:
    """World document with the two-square scenario."""
    from homotopy.world_io import write_world

    return write_world(tmp_path / "world.xml", 100, 100, two_obstacles)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove HOMOTOPY_* configuration variables for every test."""
    import os

    for key in list(os.environ):
        if key.startswith("HOMOTOPY_") and not key.startswith("HOMOTOPY_LOG_"):
            monkeypatch.delenv(key)


# =============================================================================
# Marker Registrations
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
