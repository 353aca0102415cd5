"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from license_validator.models.config import Verbosity
from license_validator.models.result import ResultSet


def format_license_list(licenses: list[str]) -> str:
    """Join licenses for display, bracketing entries that contain commas.

    Args:
        licenses: License strings, already sorted.

    Returns:
        e.g. ``MIT, [GPL-2.0, ISC]``.
    """
    return ", ".join(f"[{lic}]" if "," in lic else lic for lic in licenses)


class TerminalFormatter:
    """Format validation results for terminal display using Rich."""

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_result(self, result: ResultSet, list_only: bool = False) -> None:
        """Display a validation result.

        Quiet mode prints nothing unless licenses are being listed.

        Args:
            result: The result to display.
            list_only: Whether the run only enumerates licenses.
        """
        if self._verbosity == Verbosity.QUIET and not list_only:
            return

        self._console.print(
            f"Identified licenses: {escape(format_license_list(result.licenses))}"
        )

        if not list_only and result.has_violations:
            self._print_invalid_packages(result)

        if self._verbosity == Verbosity.VERBOSE:
            self._print_package_table(result)

        if not list_only and not result.has_violations:
            self._console.print("[green]All licenses ok.[/green]")

    def _print_invalid_packages(self, result: ResultSet) -> None:
        for identity in result.invalid_packages:
            license_str = result.packages.get(identity, "")
            self._console.print(
                f"[red]Invalid license:[/red] {escape(identity)}: "
                f"[yellow]{escape(license_str)}[/yellow]"
            )

    def _print_package_table(self, result: ResultSet) -> None:
        table = Table(title="License Validation Results")

        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("License", style="green")
        table.add_column("Status")

        # Ordinal sort, consistent with the license list
        for verdict in sorted(result.verdicts, key=lambda v: v.identity):
            if not verdict.accepted:
                status = "[red]invalid[/red]"
            elif verdict.via_exception:
                status = "[blue]exception[/blue]"
            else:
                status = "[green]ok[/green]"
            table.add_row(
                escape(verdict.identity), escape(verdict.matched_license), status
            )

        self._console.print(table)
