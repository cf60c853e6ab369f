"""
Homotopy Exception Hierarchy.

This module defines all custom exceptions used in the homotopy package.
Every decomposition failure is raised at the point where the violated
invariant is detected and names the obstacle or ray that triggered it.
"""

from typing import Any, Optional


class HomotopyError(Exception):
    """Base exception for all homotopy errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(HomotopyError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Data Errors
# =============================================================================


class DataError(HomotopyError):
    """Base class for input data errors."""

    pass


class InvalidObstacleError(DataError):
    """Obstacle polygon is malformed."""

    def __init__(self, obstacle_id: Any, reason: str):
        super().__init__(
            f"Invalid obstacle (id={obstacle_id}): {reason}",
            details={"obstacle_id": obstacle_id, "reason": reason},
        )


class InvalidWorkspaceError(DataError):
    """Workspace dimensions are unusable."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid workspace: {reason}",
            details={"reason": reason},
        )


class WorldFileError(DataError):
    """World document could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot read world file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


# =============================================================================
# Decomposition Errors
# =============================================================================


class DecompositionError(HomotopyError):
    """Base class for failures of the decomposition engine."""

    pass


class DegenerateBasePointError(DecompositionError):
    """No valid base point was found within the attempt bound."""

    def __init__(self, attempts: int):
        super().__init__(
            f"No valid base point found after {attempts} attempts",
            details={"attempts": attempts},
        )


class InvalidBasePointError(DecompositionError):
    """A caller-supplied base point violates the base point contract."""

    def __init__(self, point: Any, reason: str):
        super().__init__(
            f"Invalid base point {point}: {reason}",
            details={"point": str(point), "reason": reason},
        )


class DegenerateRayOrderingError(DecompositionError):
    """Two rays leave the base point in the same direction."""

    def __init__(self, first: str, second: str):
        super().__init__(
            f"Rays {first} and {second} have the same direction",
            details={"first": first, "second": second},
        )


class MissingBoundaryIntersectionError(DecompositionError):
    """A ray from the base point does not reach the workspace boundary."""

    def __init__(self, obstacle_id: Any, kind: str):
        super().__init__(
            f"The {kind} ray of obstacle {obstacle_id} does not hit the workspace boundary",
            details={"obstacle_id": obstacle_id, "kind": kind},
        )


class KeyPointSamplingError(DecompositionError):
    """No key point strictly inside the obstacle could be produced."""

    def __init__(self, obstacle_id: Any, attempts: int):
        super().__init__(
            f"Could not place a key point inside obstacle {obstacle_id}",
            details={"obstacle_id": obstacle_id, "attempts": attempts},
        )
