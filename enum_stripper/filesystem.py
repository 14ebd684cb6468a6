"""Filesystem helpers for enum-stripper."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from .config import StripperConfig
from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_ITERATIONS, SCRIPT_EXTENSIONS
from .models import ArtifactPaths, StripResult

MAX_FILE_SIZE_ENV_VAR = "ENUM_STRIPPER_MAX_FILE_SIZE"
MAX_ITERATIONS_ENV_VAR = "ENUM_STRIPPER_MAX_ITERATIONS"


def _positive_int_from_env(name: str, default: int | None) -> int | None:
    env_value = os.environ.get(name)
    if env_value is None:
        return default

    try:
        value = int(env_value)
    except ValueError as error:
        error_message = f"Invalid value for {name}: {env_value} (expected positive integer)"
        raise ValueError(error_message) from error

    if value <= 0:
        error_message = f"{name} must be a positive integer, got {value}."
        raise ValueError(error_message)

    return value


def get_max_file_size(default: int | None = DEFAULT_MAX_FILE_SIZE) -> int | None:
    """Resolve the maximum allowed bundle size.

    Args:
        default: Fallback value in bytes when the environment variable is unset;
            None means no limit.

    Returns:
        int | None: Maximum allowed size in bytes, or None for no limit.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["ENUM_STRIPPER_MAX_FILE_SIZE"] = "5242880"
        limit = get_max_file_size()
    """
    return _positive_int_from_env(MAX_FILE_SIZE_ENV_VAR, default)


def get_max_iterations(default: int = DEFAULT_MAX_ITERATIONS) -> int:
    """Resolve the scanner iteration limit.

    Args:
        default: Fallback value when the environment variable is unset.

    Returns:
        int: Maximum number of scanner steps.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    return _positive_int_from_env(MAX_ITERATIONS_ENV_VAR, default)


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a bundle filepath.

    Absolute paths are accepted wherever they point; relative paths are taken
    from `base_dir`.

    Args:
        raw_path: User-supplied path to a script bundle (absolute or relative).
        base_dir: Directory that relative paths are resolved against.

    Returns:
        Path: Absolute path to the bundle.

    Raises:
        ValueError: If the path does not exist, is not a regular file, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("build/assets/app.js", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = base_dir / path

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    if resolved.suffix.lower() not in SCRIPT_EXTENSIONS:
        error_message = f"{resolved} is not a script bundle.\n"
        error_message += f"Supported extensions are: {', '.join(SCRIPT_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def derive_artifact_paths(filepath: Path, config: StripperConfig) -> ArtifactPaths:
    """Name the backup and log files that sit beside a bundle.

    The bundle's final extension is replaced by the configured suffixes, so
    ``app.js`` yields ``app.orig.js`` and ``app.elog.txt``.

    Args:
        filepath: Bundle path.
        config: Configuration holding the suffixes.

    Returns:
        ArtifactPaths: Target, backup and log paths.

    Raises:
        ValueError: If a derived path would overwrite the bundle itself.
    """
    stem = filepath.name[: len(filepath.name) - len(filepath.suffix)]
    paths = ArtifactPaths(
        target=filepath,
        backup=filepath.with_name(stem + config.backup_suffix),
        log=filepath.with_name(stem + config.log_suffix),
    )

    for derived in (paths.backup, paths.log):
        if derived == filepath:
            error_message = f"Artifact path {derived} would overwrite the bundle."
            raise ValueError(error_message)

    return paths


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int | None, filepath: Path):
    """Guard against bundles that exceed the configured maximum size.

    Args:
        stat_result: File stat used to determine size in bytes.
        max_size: Maximum allowed size in bytes; None disables the check.
        filepath: Path to the file being checked.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if max_size is not None and stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Detect changes between two filesystem snapshots.

    Args:
        expected_stat: Stat captured before processing.
        current_stat: Stat captured after processing.
        filepath: Path to the file being monitored.

    Raises:
        IOError: If inode, device, size, or modification time differ.
    """
    fingerprint_before = (
        getattr(expected_stat, "st_ino", None),
        getattr(expected_stat, "st_dev", None),
        expected_stat.st_size,
        expected_stat.st_mtime_ns,
    )
    fingerprint_after = (
        getattr(current_stat, "st_ino", None),
        getattr(current_stat, "st_dev", None),
        current_stat.st_size,
        current_stat.st_mtime_ns,
    )

    if fingerprint_before != fingerprint_after:
        error_message = f"{filepath} changed during processing; refusing to overwrite."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Newline translation is disabled so the text round-trips byte for byte.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("build/assets/app.js")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def _write_atomic(
    path: Path,
    content: str,
    permissions: int,
    owner: tuple[int, int] | None = None,
    warn: Callable[[str], None] | None = None,
):
    """Write `content` to `path` through a temporary file in the same directory."""
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=path.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)

            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

            # Ownership needs privileges and platform support
            if owner is not None and hasattr(os, "chown"):
                try:
                    os.chown(tmp_file.name, *owner)
                except PermissionError:
                    if warn is not None:
                        warn(
                            f"Warning: Could not preserve file ownership for {path.name} "
                            "(requires elevated privileges)"
                        )

        os.replace(temp_path, path)
    finally:
        if temp_path is not None:
            try:
                Path(temp_path).unlink(missing_ok=True)
            except OSError:
                pass


def write_artifacts(
    filepath: Path,
    result: StripResult,
    config: StripperConfig,
    expected_stat: os.stat_result,
    initial_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
) -> ArtifactPaths:
    """Write the backup, the rewritten bundle and the removal log.

    The backup holds the original text, the bundle is overwritten with the
    stripped text, and the log lists each removed definition on its own line
    in discovery order. Each file is replaced atomically; the first failure
    stops the run.

    Args:
        filepath: Bundle to rewrite.
        result: Outcome of stripping the bundle.
        config: Configuration holding the artifact suffixes.
        expected_stat: File stat the bundle must still match, used to detect races.
        initial_stat: File stat captured before reading, used to preserve access time.
        warn: Optional callback for emitting non-fatal warnings.

    Returns:
        ArtifactPaths: Paths that were written.

    Raises:
        IOError: If the bundle changed since it was read or any artifact
            cannot be written. The message names the failing artifact.
        ValueError: If a derived artifact path would overwrite the bundle.

    Examples:
        write_artifacts(path, result, config, post_stat, pre_stat)
    """
    paths = derive_artifact_paths(filepath, config)

    permissions = stat.S_IMODE(expected_stat.st_mode)
    uid = getattr(expected_stat, "st_uid", None)
    gid = getattr(expected_stat, "st_gid", None)
    owner = (uid, gid) if uid is not None and gid is not None else None

    current_stat = collect_file_stat(filepath)
    ensure_file_unchanged(expected_stat, current_stat, filepath)

    try:
        _write_atomic(paths.backup, result.source, permissions)
    except OSError as error:
        raise IOError(f"Error writing backup {paths.backup}: {error}") from error

    try:
        _write_atomic(filepath, result.text, permissions, owner=owner, warn=warn)
        # Keep the access time from before the bundle was read
        current_stat = filepath.stat()
        os.utime(filepath, ns=(initial_stat.st_atime_ns, current_stat.st_mtime_ns))
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error

    try:
        _write_atomic(paths.log, result.removal_log, permissions)
    except OSError as error:
        raise IOError(f"Error writing enum log {paths.log}: {error}") from error

    return paths
