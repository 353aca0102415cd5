"""Base license source interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from license_validator.models.report import LicenseReport


class LicenseSource(ABC):
    """Abstract base class for license sources.

    A license source walks a project's dependency graph and reports the
    declared licenses of every package it finds. Errors raised here reach
    the caller unchanged.
    """

    @abstractmethod
    async def find(
        self,
        directory: Path,
        max_depth: Optional[int] = 0,
        production_only: bool = False,
    ) -> list[LicenseReport]:
        """Collect license reports for a project.

        Args:
            directory: Project root directory.
            max_depth: 0 for direct dependencies only, None for the full
                transitive closure.
            production_only: Skip development dependencies.

        Returns:
            One LicenseReport per resolved package version.
        """
