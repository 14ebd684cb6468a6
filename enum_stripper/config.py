"""Configuration loading and management."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass
class StripperConfig:
    """Configuration for stripping compiled enums from a bundle.

    Attributes:
        backup_suffix: Suffix that replaces the bundle's extension for the
            backup of the original file.
        log_suffix: Suffix that replaces the bundle's extension for the log of
            removed definitions.
        boundary_safe: Only substitute references that are not part of a
            longer identifier.
        max_iterations: Upper bound on scanner steps before the scan is
            abandoned.
        max_file_size: Maximum bundle size in bytes, or None for no limit.

    Examples:
        StripperConfig(backup_suffix=".bak.js", boundary_safe=True)
    """

    # Artifact naming
    backup_suffix: str = ".orig.js"
    log_suffix: str = ".elog.txt"

    # Substitution
    boundary_safe: bool = False

    # Limits
    max_iterations: int = 100_000_000
    max_file_size: int | None = None


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`backup_suffix` must not be empty")
    """


def load_config(search_path: Path) -> StripperConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.enum-stripper]`` table from `pyproject.toml` and the
    ``[enum-stripper]`` or ``[tool.enum-stripper]`` table from
    `.enum-stripper.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        StripperConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("build/assets"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "enum-stripper")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".enum-stripper.toml",
            table_paths=[("enum-stripper",), ("tool", "enum-stripper")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return StripperConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> StripperConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> StripperConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return StripperConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return StripperConfig()

    try:
        return StripperConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: StripperConfig) -> None:
    """Validate a `StripperConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a suffix is empty, contains a path separator or
            clashes with the other suffix, or if a numeric limit is not a
            positive integer.

    Examples:
        validate_config(StripperConfig(max_iterations=1_000))
    """
    _ensure_integers(
        {
            "max_iterations": config.max_iterations,
            **({"max_file_size": config.max_file_size} if config.max_file_size is not None else {}),
        }
    )

    for name in ("backup_suffix", "log_suffix"):
        suffix = getattr(config, name)
        if not isinstance(suffix, str) or not suffix:
            raise ConfigError(f"`{name}` must not be empty")
        if "/" in suffix or os.sep in suffix:
            raise ConfigError(f"`{name}` must not contain a path separator")
    if config.backup_suffix == config.log_suffix:
        raise ConfigError("`backup_suffix` and `log_suffix` must differ")

    if not isinstance(config.boundary_safe, bool):
        raise ConfigError("`boundary_safe` must be a boolean")

    _ensure_positive(
        {
            "max_iterations": config.max_iterations,
            **({"max_file_size": config.max_file_size} if config.max_file_size is not None else {}),
        }
    )


def apply_overrides(config: StripperConfig, **overrides: object) -> StripperConfig:
    """Apply override values to a `StripperConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        StripperConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `StripperConfig`.

    Examples:
        updated = apply_overrides(config, boundary_safe=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> StripperConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        StripperConfig: Validated configuration ready for stripping.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), log_suffix=".enums.txt")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
