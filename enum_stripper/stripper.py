"""Enum stripping for whole bundles."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .config import ConfigError, StripperConfig, validate_config
from .exceptions import RunawayScanError, StripError
from .filesystem import safe_read
from .members import extract_members
from .models import EnumTable, StripResult
from .scanner import scan_definitions
from .substitution import substitute_references


def strip_enums(
    content: str,
    config: StripperConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> StripResult:
    """Remove compiled enum definitions and inline their member values.

    Args:
        content: Full bundle text.
        config: Configuration controlling the scan and substitution. Defaults
            to a new `StripperConfig` when omitted.
        warn: Optional callback for non-fatal warnings.

    Returns:
        StripResult: Original and rewritten text plus the removed definitions.
            `truncated` is True when the scan hit its iteration limit.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        result = strip_enums('var n=(t=>(t.A="a",t))(n||{});f(n.A);')
        result.text  # 'f("a");'
    """
    config = config or StripperConfig()
    validate_config(config)

    scan = scan_definitions(content, config.max_iterations, warn=warn)
    tables = [
        EnumTable(
            definition=definition,
            members=extract_members(definition.interior, definition.inner_root),
        )
        for definition in scan.definitions
    ]
    text = substitute_references(scan.text, tables, boundary_safe=config.boundary_safe)

    return StripResult(source=content, text=text, tables=tables, truncated=scan.truncated)


class StripFileError(Exception):
    """Raised when stripping a bundle file fails."""


def strip_file(
    filepath: Path,
    config: StripperConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> StripResult:
    """Read a bundle and strip its enums without writing anything.

    Args:
        filepath: Path to the bundle.
        config: Configuration controlling the run; defaults to a new
            `StripperConfig` when omitted.
        warn: Optional callback for non-fatal warnings.

    Returns:
        StripResult: Result of `strip_enums` on the file contents.

    Raises:
        StripFileError: If configuration is invalid, the file cannot be read
            or decoded, or the scan stopped at the iteration limit.

    Examples:
        result = strip_file(Path("build/assets/app.js"), config)
    """
    config = config or StripperConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise StripFileError(str(error)) from error

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise StripFileError(error_message) from error
    except IOError as error:
        raise StripFileError(str(error)) from error

    try:
        result = strip_enums(content, config, warn=warn)
    except StripError as error:
        raise StripFileError(f"{filepath}: {error}") from error

    if result.truncated:
        error = RunawayScanError(config.max_iterations)
        raise StripFileError(f"{filepath}: {error}") from error

    return result
