"""Configuration loading and management for depsurface.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.depsurface.toml)
    3. Project config (./depsurface.toml)
    4. Explicit config file
    5. Environment variables (DEPSURFACE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .metrics.loc import LANGUAGES

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a code-metrics run.

    Attributes:
        Line counting:
            primary_language: Language whose lines feed ``language_loc``
            excluded_dirs: Directory names skipped while counting (build artifacts)
            count_hidden_files: Include files and directories starting with "."

        Report scope:
            only_direct: Report on direct dependencies only (False = all deps)
            include_dev_dependencies: Keep dev-only edges from cargo metadata

        Unsafe scanning:
            scan_unsafe: Run the unsafe scanner on workspace members
            scanner_command: Command prefix for the scanner (e.g. cargo geiger)
            scanner_timeout_seconds: Per-invocation timeout (None = no limit)
            metadata_timeout_seconds: Timeout for ``cargo metadata``

        Performance:
            workers: Threads used to assemble reports

        Persistent LOC cache:
            cache_enabled: Persist line counts across runs
            cache_dir: Directory for the cache
            cache_ttl_hours: Time-to-live for cached line counts

        Output:
            verbosity: Logging verbosity level
    """

    # Line counting
    primary_language: str = "rust"
    excluded_dirs: list[str] = field(default_factory=lambda: ["target"])
    count_hidden_files: bool = True

    # Report scope
    only_direct: bool = True
    include_dev_dependencies: bool = True

    # Unsafe scanning
    scan_unsafe: bool = True
    scanner_command: list[str] = field(default_factory=lambda: ["cargo", "geiger"])
    scanner_timeout_seconds: Optional[int] = None
    metadata_timeout_seconds: int = 120

    # Performance
    workers: int = 1

    # Persistent LOC cache
    cache_enabled: bool = True
    cache_dir: str = ".depsurface-cache"
    cache_ttl_hours: int = 168

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.primary_language not in LANGUAGES:
            raise ValueError(
                f"primary_language must be one of {', '.join(sorted(LANGUAGES))}"
            )
        if not self.scanner_command:
            raise ValueError("scanner_command must not be empty")
        if self.scanner_timeout_seconds is not None and self.scanner_timeout_seconds < 1:
            raise ValueError("scanner_timeout_seconds must be at least 1")
        if self.metadata_timeout_seconds < 1:
            raise ValueError("metadata_timeout_seconds must be at least 1")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")

    def fingerprint(self) -> dict[str, Any]:
        """Settings that change line-count results (used for cache keys)."""
        return {
            "primary_language": self.primary_language,
            "excluded_dirs": sorted(self.excluded_dirs),
            "count_hidden_files": self.count_hidden_files,
        }


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If an environment variable cannot be parsed
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".depsurface.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "depsurface.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Boolean CLI flags map onto verbosity
    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DEPSURFACE_* environment variables.

    List fields are not settable from the environment.

    Returns:
        Dict of field_name -> parsed_value for any DEPSURFACE_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"DEPSURFACE_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

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

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e
