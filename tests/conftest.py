"""Shared fixtures for license-validator tests."""

from pathlib import Path
from typing import Any, Optional

import pytest
from click.testing import CliRunner

from license_validator.models.report import LicenseReport
from license_validator.sources.base import LicenseSource


class StaticLicenseSource(LicenseSource):
    """License source returning canned data, recording how it was called."""

    def __init__(self, reports: Any = None, error: Optional[BaseException] = None) -> None:
        self.reports = reports
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def find(
        self,
        directory: Path,
        max_depth: Optional[int] = 0,
        production_only: bool = False,
    ) -> list[LicenseReport]:
        self.calls.append(
            {
                "directory": directory,
                "max_depth": max_depth,
                "production_only": production_only,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reports


def make_reports(*entries: tuple[str, list[str]]) -> list[LicenseReport]:
    """Build reports from (identity, licenses) pairs."""
    return [LicenseReport.from_identity(identity, licenses) for identity, licenses in entries]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def static_source() -> type[StaticLicenseSource]:
    """Provide the canned license source class."""
    return StaticLicenseSource


@pytest.fixture
def reports_from() -> Any:
    """Provide a builder for reports from (identity, licenses) pairs."""
    return make_reports
