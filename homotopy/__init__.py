"""
Homotopy - Homotopy-aware workspace decomposition.

This package splits a rectangular workspace containing polygonal obstacles
into angular sectors around a shared base point. Each obstacle contributes
two rays (toward and away from its key point); the crossings of those rays
with other obstacles' borders give a planner the labels it needs to tell
homotopy classes of paths apart.

Basic Usage:
    from homotopy import decompose

    result = decompose(100, 100, [
        [(10, 40), (30, 40), (30, 60), (10, 60)],
        [(70, 35), (90, 35), (90, 55), (70, 55)],
    ])
    for region in result.regions:
        print(region.boundary)

For more control:
    from homotopy.config import DecompositionConfig, ConfigManager
    from homotopy.decomposer import WorkspaceDecomposer
    from homotopy.exceptions import DegenerateRayOrderingError
"""

from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Exceptions
# =============================================================================

from homotopy.exceptions import (
    HomotopyError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    DataError,
    InvalidObstacleError,
    InvalidWorkspaceError,
    WorldFileError,
    DecompositionError,
    DegenerateBasePointError,
    InvalidBasePointError,
    DegenerateRayOrderingError,
    MissingBoundaryIntersectionError,
    KeyPointSamplingError,
)

# =============================================================================
# Logging
# =============================================================================

from homotopy.logging import (
    LOG_DEBUG,
    LOG_INFO,
    LOG_WARN,
    LOG_ERROR,
    get_logger,
    setup_logging,
    profile_scope,
    timed,
)

# =============================================================================
# Configuration
# =============================================================================

from homotopy.config import (
    DecompositionConfig,
    SearchConfig,
    SamplingConfig,
    ConfigManager,
    create_default_config,
    load_config,
    get_config,
    init_config,
)

# =============================================================================
# Core API
# =============================================================================

from homotopy.geometry import (
    Direction2D,
    Line2D,
    Point2D,
    Polygon2D,
    Ray2D,
    Segment2D,
    Side,
    orientation,
)

from homotopy.workspace import Workspace

from homotopy.obstacle import (
    Obstacle,
    load_obstacles,
    sample_key_points,
)

from homotopy.base_point import (
    BasePointSelection,
    check_base_point,
    select_base_point,
)

from homotopy.ray_subdivision import (
    Crossing,
    RayKind,
    RaySubdivision,
    build_corner_rays,
    build_obstacle_rays,
    compute_crossings,
    sort_rays,
    subdivide_rays,
)

from homotopy.region import (
    Region,
    assemble_regions,
)

from homotopy.decomposer import (
    Decomposition,
    WorkspaceDecomposer,
    decompose,
)

from homotopy.world_io import (
    World,
    read_world,
    write_world,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "HomotopyError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "DataError",
    "InvalidObstacleError",
    "InvalidWorkspaceError",
    "WorldFileError",
    "DecompositionError",
    "DegenerateBasePointError",
    "InvalidBasePointError",
    "DegenerateRayOrderingError",
    "MissingBoundaryIntersectionError",
    "KeyPointSamplingError",
    # Logging
    "LOG_DEBUG",
    "LOG_INFO",
    "LOG_WARN",
    "LOG_ERROR",
    "get_logger",
    "setup_logging",
    "profile_scope",
    "timed",
    # Configuration
    "DecompositionConfig",
    "SearchConfig",
    "SamplingConfig",
    "ConfigManager",
    "create_default_config",
    "load_config",
    "get_config",
    "init_config",
    # Geometry
    "Direction2D",
    "Line2D",
    "Point2D",
    "Polygon2D",
    "Ray2D",
    "Segment2D",
    "Side",
    "orientation",
    # Decomposition
    "Workspace",
    "Obstacle",
    "load_obstacles",
    "sample_key_points",
    "BasePointSelection",
    "check_base_point",
    "select_base_point",
    "Crossing",
    "RayKind",
    "RaySubdivision",
    "build_corner_rays",
    "build_obstacle_rays",
    "compute_crossings",
    "sort_rays",
    "subdivide_rays",
    "Region",
    "assemble_regions",
    "Decomposition",
    "WorkspaceDecomposer",
    "decompose",
    # World documents
    "World",
    "read_world",
    "write_world",
]
