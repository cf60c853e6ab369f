"""
Decomposition settings.

Settings are resolved in three layers, later layers winning:

1. dataclass defaults
2. a YAML file
3. HOMOTOPY_<SECTION>_<KEY> environment variables, e.g.
   HOMOTOPY_SEARCH_MAX_ATTEMPTS=500 or HOMOTOPY_SEED=7

Environment values are parsed as YAML scalars, so ``50``, ``0.4``, ``true``
and ``null`` arrive as int, float, bool and None.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from homotopy.exceptions import ConfigNotFoundError, ConfigurationError, ConfigValidationError


KEY_POINT_STRATEGIES = ("random", "interior")


# =============================================================================
# Settings
# =============================================================================


def _require_int(key: str, value: Any) -> None:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(key, "must be an integer", value)


def _require_number(key: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(key, "must be a number", value)


@dataclass
class SearchConfig:
    """Base point search.

    Attributes:
        max_attempts: Candidates tested before giving up, centre included
        window_fraction: Side of the sampling window relative to the
            workspace, centred on the workspace centre
    """

    max_attempts: int = 10000
    window_fraction: float = 0.2

    def validate(self) -> None:
        _require_int("search.max_attempts", self.max_attempts)
        if self.max_attempts < 1:
            raise ConfigValidationError("search.max_attempts", "must be >= 1", self.max_attempts)
        _require_number("search.window_fraction", self.window_fraction)
        if not 0 < self.window_fraction <= 1:
            raise ConfigValidationError(
                "search.window_fraction", "must be in (0, 1]", self.window_fraction
            )


@dataclass
class SamplingConfig:
    """Key point sampling.

    Attributes:
        strategy: ``random`` (rejection sampling) or ``interior``
            (deterministic interior point)
        max_attempts: Rejection sampling budget per obstacle
    """

    strategy: str = "random"
    max_attempts: int = 1000

    def validate(self) -> None:
        if self.strategy not in KEY_POINT_STRATEGIES:
            raise ConfigValidationError(
                "sampling.strategy", f"must be one of {KEY_POINT_STRATEGIES}", self.strategy
            )
        _require_int("sampling.max_attempts", self.max_attempts)
        if self.max_attempts < 1:
            raise ConfigValidationError("sampling.max_attempts", "must be >= 1", self.max_attempts)


@dataclass
class DecompositionConfig:
    """All decomposition settings."""

    search: SearchConfig = field(default_factory=SearchConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)

    # Shared by key point and base point sampling; None draws fresh entropy
    seed: Optional[int] = None

    def validate(self) -> None:
        """Raise ConfigValidationError on the first invalid setting."""
        self.search.validate()
        self.sampling.validate()
        if self.seed is not None:
            _require_int("seed", self.seed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecompositionConfig":
        """Build from a nested mapping; missing keys keep their defaults."""
        return cls(
            search=SearchConfig(**(data.get("search") or {})),
            sampling=SamplingConfig(**(data.get("sampling") or {})),
            seed=data.get("seed"),
        )


# =============================================================================
# Layered Loading
# =============================================================================


def _merge(base: Dict[str, Any], layer: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``layer`` into ``base`` in place."""
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            base[key] = value
    return base


class ConfigManager:
    """Resolves settings from defaults, a YAML file and the environment.

    Attributes:
        sources: Layers applied by the last ``load``, in order
    """

    ENV_PREFIX = "HOMOTOPY_"
    # Consumed by homotopy.logging
    ENV_IGNORED = ("log_",)

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self._config_path = Path(config_path) if config_path else None
        self._config: Optional[DecompositionConfig] = None
        self._raw_config: Dict[str, Any] = {}
        self.sources: List[str] = []

    def load(self, validate: bool = True) -> DecompositionConfig:
        """Resolve all layers into a DecompositionConfig.

        Args:
            validate: Run ``DecompositionConfig.validate`` on the result.

        Raises:
            ConfigNotFoundError: If the configured file does not exist.
            ConfigurationError: If the file is not valid YAML.
            ConfigValidationError: If a key is unknown, a value invalid, or
                the file does not hold a mapping.
        """
        raw = create_default_config()
        self.sources = ["defaults"]

        if self._config_path is not None:
            _merge(raw, self._file_layer(self._config_path))
            self.sources.append(str(self._config_path))

        env = self._env_layer()
        if env:
            _merge(raw, env)
            self.sources.append("environment")

        self._raw_config = raw
        try:
            self._config = DecompositionConfig.from_dict(raw)
        except TypeError as e:
            raise ConfigValidationError("*", f"unknown setting: {e}") from e

        if validate:
            self._config.validate()
        return self._config

    @staticmethod
    def _file_layer(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ConfigNotFoundError(str(path))
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Malformed YAML in {path}", details={"path": str(path), "error": str(e)}
            ) from e
        if not isinstance(data, Mapping):
            raise ConfigValidationError(
                "*", f"{path} must hold a mapping of settings", type(data).__name__
            )
        return data

    def _env_layer(self) -> Dict[str, Any]:
        """Nested settings from HOMOTOPY_* variables.

        The first underscore after the prefix separates section from key;
        names that match a top-level setting (``seed``) are taken whole.
        """
        top_level = {
            name for name, value in create_default_config().items() if not isinstance(value, dict)
        }
        layer: Dict[str, Any] = {}
        for name, raw in os.environ.items():
            if not name.startswith(self.ENV_PREFIX):
                continue
            key = name[len(self.ENV_PREFIX):].lower()
            if not key or key.startswith(self.ENV_IGNORED):
                continue

            value = yaml.safe_load(raw) if raw.strip() else None
            section, _, option = key.partition("_")
            if key in top_level or not option:
                layer[key] = value
            else:
                layer.setdefault(section, {})[option] = value
        return layer

    @property
    def config(self) -> DecompositionConfig:
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a resolved value by dotted path, e.g. ``search.max_attempts``."""
        node: Any = self._raw_config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node


# =============================================================================
# Module-level helpers
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Default settings as a nested dictionary."""
    return DecompositionConfig().to_dict()


def load_config(path: Union[str, Path], validate: bool = True) -> DecompositionConfig:
    """Resolve settings with ``path`` as the file layer."""
    return ConfigManager(path).load(validate=validate)


_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Process-wide ConfigManager, created on first use."""
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Replace the process-wide ConfigManager and load it."""
    global _manager
    _manager = ConfigManager(path)
    _manager.load()
    return _manager
