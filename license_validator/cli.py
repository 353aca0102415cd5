"""CLI entry point for license-validator."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from license_validator import __version__
from license_validator.config import load_config
from license_validator.constants import EXIT_ERROR, EXIT_ISSUES, EXIT_SUCCESS
from license_validator.exceptions import LicenseValidatorError
from license_validator.models.config import ValidatorConfig, Verbosity
from license_validator.models.result import ResultSet
from license_validator.output.result_json import ResultJsonFormatter
from license_validator.output.terminal import TerminalFormatter
from license_validator.validator import validate

# Module-level console for consistent output
_console = Console()
# Separate console for warnings and errors (writes to stderr)
_error_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Python License Validator - Check dependency licenses against a policy.

    Verifies that every dependency of a Python project declares a license
    from an allow-list, or is explicitly allowed as a package exception.

    \b
    Examples:
        license-validator check --allow-licenses MIT --allow-licenses ISC
        license-validator check ~/project --allow-packages convict
        license-validator check --allow-packages "pg@^3.6.0"
        license-validator check --list-licenses --deep
    """
    pass


@main.command()
@click.argument("directory", required=False, default=None)
@click.option(
    "--allow-licenses",
    "allow_licenses",
    multiple=True,
    help="A license to allow. Repeat for several. Validation fails if a "
    "package is not licensed under any allowed license.",
)
@click.option(
    "--allow-packages",
    "allow_packages",
    multiple=True,
    help="A package to allow regardless of its license, optionally with an "
    "npm-style version range (e.g. pg@^3.6.0). Repeat for several.",
)
@click.option(
    "--list-licenses",
    "-l",
    "list_only",
    is_flag=True,
    default=False,
    help="Don't validate; just list the licenses in use.",
)
@click.option(
    "--deep",
    "-d",
    "deep_scan",
    is_flag=True,
    default=False,
    help="Check all transitive dependencies, not just direct ones.",
)
@click.option(
    "--production",
    "-p",
    "production_only",
    is_flag=True,
    default=False,
    help="Only traverse runtime dependencies, no development dependencies.",
)
@click.option(
    "--warn",
    "warn_only",
    is_flag=True,
    default=False,
    help="Only print invalid licenses, don't exit with an error.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["terminal", "json"], case_sensitive=False),
    default="terminal",
    help="Output format for results (default: terminal).",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Detailed list of package licenses.",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Don't output anything.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file.",
)
def check(
    directory: Optional[str],
    allow_licenses: tuple[str, ...],
    allow_packages: tuple[str, ...],
    list_only: bool,
    deep_scan: bool,
    production_only: bool,
    warn_only: bool,
    output_format: str,
    verbose_flag: bool,
    quiet_flag: bool,
    config_path: Optional[str],
) -> None:
    """Validate the licenses of a project's dependencies.

    DIRECTORY is the project root containing pyproject.toml (default: the
    current working directory). Allowed licenses and packages given on the
    command line replace those from the configuration file.

    \b
    Examples:
        license-validator check --allow-licenses MIT --allow-licenses Apache-2.0
        license-validator check ~/project --allow-packages "pg@^3.6.0"
        license-validator check --list-licenses
        license-validator check --deep --production --warn
        license-validator check --config license-validator.json
    """
    if verbose_flag and quiet_flag:
        raise click.UsageError("--verbose and --quiet are mutually exclusive.")

    root = directory if directory is not None else str(Path.cwd())
    format_value = output_format.lower()

    try:
        config = load_config(
            config_path,
            start_dir=Path(root) if Path(root).is_dir() else None,
        ).merged_with(
            allowed_licenses=allow_licenses,
            allowed_packages=allow_packages,
            list_only=list_only,
            production_only=production_only,
            deep_scan=deep_scan,
        )

        # Listing always produces output
        if quiet_flag and not config.list_only:
            verbosity = Verbosity.QUIET
        elif verbose_flag:
            verbosity = Verbosity.VERBOSE
        else:
            verbosity = Verbosity.NORMAL

        warn = None if verbosity == Verbosity.QUIET else _display_warning
        result = asyncio.run(validate(root, config, warn=warn))

        _display_result(result, config, format_value, verbosity)

        if not config.list_only and result.has_violations and not warn_only:
            sys.exit(EXIT_ISSUES)
        sys.exit(EXIT_SUCCESS)

    except LicenseValidatorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


def _display_result(
    result: ResultSet,
    config: ValidatorConfig,
    format_type: str,
    verbosity: Verbosity,
) -> None:
    """Display a validation result in the specified format.

    Args:
        result: The result to display.
        config: Options the run used.
        format_type: Output format (terminal, json).
        verbosity: Output verbosity level.
    """
    if format_type == "json":
        click.echo(ResultJsonFormatter().format_result(result, config.list_only))
        return

    TerminalFormatter(console=_console, verbosity=verbosity).format_result(
        result, list_only=config.list_only
    )


def _display_warning(message: str) -> None:
    """Print an advisory message to stderr."""
    _error_console.print(f"[yellow]WARN:[/yellow] {escape(message)}")


def _display_error(error: LicenseValidatorError, format_type: str) -> None:
    """Display error message to user.

    All errors are written to stderr for consistent CI/CD behavior.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    message = f"Error: {type(error).__name__}: {error}"

    if format_type == "terminal":
        _error_console.print(f"[red bold]{escape(message)}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
