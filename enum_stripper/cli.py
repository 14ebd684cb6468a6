"""
Strips compiled enum definitions from a finished script bundle.
References to enum members are replaced with their literal values; the original
bundle is kept as a backup next to a log of the removed definitions.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, apply_overrides, build_config
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_iterations,
    normalize_filepath,
    write_artifacts,
)
from .stripper import StripFileError, strip_file

__all__ = ["cli"]


def _warn(message: str) -> None:
    click.echo(message, err=True)


@click.command()
@click.version_option()
@click.option("--backup-suffix", help="Suffix of the backup file (replaces the extension)")
@click.option("--log-suffix", help="Suffix of the removal log (replaces the extension)")
@click.option("--max-iterations", type=int, help="Scanner iteration limit")
@click.option(
    "--boundary-safe/--textual",
    default=None,
    help="Only replace references that are not part of a longer identifier",
)
@click.option("--dry-run", is_flag=True, help="Print the stripped bundle instead of writing files")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    backup_suffix: str | None = None,
    log_suffix: str | None = None,
    max_iterations: int | None = None,
    boundary_safe: bool | None = None,
    dry_run: bool = False,
):
    """
    Entry point for stripping enums from a bundle.

    Args:
        filepath: Path to the bundle to process.
        backup_suffix: Override for the backup file suffix.
        log_suffix: Override for the removal log suffix.
        max_iterations: Override for the scanner iteration limit.
        boundary_safe: Override for identifier-boundary matching.
        dry_run: Print the result to stdout and leave the filesystem alone.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration values are invalid.
        click.ClickException: If reading, stripping or writing fails, or the
            scan stops at the iteration limit.

    Examples:
        enum-stripper build/assets/app.js --boundary-safe
    """
    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            backup_suffix=backup_suffix,
            log_suffix=log_suffix,
            max_iterations=max_iterations,
            boundary_safe=boundary_safe,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        if max_iterations is None:
            config = apply_overrides(
                config, max_iterations=get_max_iterations(default=config.max_iterations)
            )
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        result = strip_file(filepath, config, warn=_warn)
    except StripFileError as error:
        raise click.ClickException(str(error)) from error

    if dry_run:
        click.echo(result.text, nl=False)
        return

    try:
        write_artifacts(filepath, result, config, initial_stat, initial_stat, warn=_warn)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    except IOError as error:
        raise click.ClickException(str(error)) from error

    click.echo(f"Stripped {len(result.tables)} enum definition(s) from {filepath.name}")


if __name__ == "__main__":
    cli()
