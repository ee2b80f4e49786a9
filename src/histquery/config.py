"""Configuration loading and management for histquery.

Configuration sources are merged in priority order:
    1. Defaults (defined in QueryConfig)
    2. Global config (~/.histquery.toml)
    3. Project config (./histquery.toml)
    4. Explicit config file
    5. Environment variables (HISTQUERY_* prefix)
    6. Overrides (passed as kwargs, typically from the CLI)

Example:
    >>> config = load_config(cache_dir="/tmp/cache", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import hashlib
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class QueryConfig:
    """Configuration for a query session.

    Attributes:
        Caching:
            cache_dir: Root directory for .cbor cache files
            cache_enabled: Persist derived collections between runs
            bind_cache_to_snapshot: Keep each dataset's caches in a
                subdirectory named after the dataset fingerprint

        Sampling:
            seed: Seed for random samplers

        Output control:
            max_results: Default sample size for canned queries
            verbosity: Logging verbosity level
            log_file: Optional file that receives a copy of the log
    """

    # Caching
    cache_dir: str = ".histquery-cache"
    cache_enabled: bool = True
    bind_cache_to_snapshot: bool = True

    # Sampling
    seed: int = 42

    # Output control
    max_results: int = 50
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.cache_dir:
            raise ValueError("cache_dir must not be empty")
        if self.seed < 0:
            raise ValueError("seed must be non-negative")
        if self.max_results < 0:
            raise ValueError("max_results must be non-negative")
        if self.verbosity not in _VERBOSITIES:
            raise ValueError(f"verbosity must be one of {', '.join(_VERBOSITIES)}")

    def cache_root(self, descriptor: str) -> Optional[Path]:
        """Directory holding the cache files for the dataset `descriptor`.

        Returns None when caching is disabled.
        """
        if not self.cache_enabled:
            return None
        root = Path(self.cache_dir)
        if self.bind_cache_to_snapshot:
            root = root / snapshot_fingerprint(descriptor)
        return root


def snapshot_fingerprint(descriptor: str) -> str:
    """Short stable hash identifying a dataset snapshot."""
    return hashlib.sha256(descriptor.encode("utf-8")).hexdigest()[:16]


def load_config(config_file: Optional[Path] = None, **overrides) -> QueryConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are translated into ``verbosity``.

    Returns:
        Validated QueryConfig instance

    Raises:
        ConfigurationError: If a config file or value is invalid
    """
    merged: dict = {}

    global_config = Path.home() / ".histquery.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "histquery.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return QueryConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from HISTQUERY_* environment variables.

    Supported environment variables:
        HISTQUERY_CACHE_DIR: str
        HISTQUERY_CACHE_ENABLED: bool (true/false/1/0)
        HISTQUERY_BIND_CACHE_TO_SNAPSHOT: bool
        HISTQUERY_SEED: int
        HISTQUERY_MAX_RESULTS: int
        HISTQUERY_VERBOSITY: quiet/normal/verbose
        HISTQUERY_LOG_FILE: str
    """
    type_hints = get_type_hints(QueryConfig)

    result: dict[str, Any] = {}

    for field_name in QueryConfig.__dataclass_fields__:
        env_key = f"HISTQUERY_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file can't be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
