"""Tests for the environment license source."""
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest

from license_validator.exceptions import LicenseSourceError
from license_validator.sources.environment import (
    EnvironmentLicenseSource,
    direct_requirements,
    load_manifest,
    requirement_name,
)


def _dist(name: str, version: str, license: str, requires: Optional[list[str]] = None) -> MagicMock:
    dist = MagicMock()
    dist.metadata = {"Name": name, "Version": version, "License": license}
    dist.requires = requires
    return dist


def _write_project(tmp_path: Path, body: str) -> Path:
    (tmp_path / "pyproject.toml").write_text(body)
    return tmp_path


PROJECT = """
[project]
name = "app"
version = "0.3.0"
license = "MIT"
dependencies = ["alpha>=1.0", "beta; python_version < '3'"]

[project.optional-dependencies]
docs = ["gamma"]

[dependency-groups]
dev = ["delta", {include-group = "docs"}]
"""

INSTALLED = [
    _dist("alpha", "1.2.0", "ISC", requires=["epsilon", "gamma ; extra == 'fast'"]),
    _dist("beta", "1.0.0", "MIT"),
    _dist("gamma", "2.0.0", "BSD-3-Clause"),
    _dist("delta", "0.1.0", "Apache-2.0"),
    _dist("epsilon", "3.1.0", "GPL-2.0", requires=["zeta"]),
    _dist("zeta", "1.0.0", "MIT"),
]


class TestLoadManifest:
    """Tests for load_manifest function."""

    def test_missing_manifest(self, tmp_path: Path) -> None:
        """Test that a directory without pyproject.toml is an error."""
        with pytest.raises(LicenseSourceError, match="No pyproject.toml"):
            load_manifest(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Test that malformed TOML is an error."""
        _write_project(tmp_path, "[project\nname = ")

        with pytest.raises(LicenseSourceError, match="Invalid TOML"):
            load_manifest(tmp_path)

    def test_parses_manifest(self, tmp_path: Path) -> None:
        """Test that a valid manifest is parsed."""
        _write_project(tmp_path, PROJECT)

        assert load_manifest(tmp_path)["project"]["name"] == "app"


class TestDirectRequirements:
    """Tests for direct_requirements function."""

    def test_all_requirements(self, tmp_path: Path) -> None:
        """Test that optional and group requirements are included."""
        _write_project(tmp_path, PROJECT)

        requirements = direct_requirements(load_manifest(tmp_path), production_only=False)

        assert requirements == [
            "alpha>=1.0",
            "beta; python_version < '3'",
            "gamma",
            "delta",
        ]

    def test_production_only(self, tmp_path: Path) -> None:
        """Test that only runtime dependencies are kept."""
        _write_project(tmp_path, PROJECT)

        requirements = direct_requirements(load_manifest(tmp_path), production_only=True)

        assert requirements == ["alpha>=1.0", "beta; python_version < '3'"]

    def test_no_project_table(self) -> None:
        """Test that a manifest without [project] has no requirements."""
        assert direct_requirements({}, production_only=False) == []


class TestRequirementName:
    """Tests for requirement_name function."""

    def test_plain_requirement(self) -> None:
        """Test that the name is returned."""
        assert requirement_name("requests>=2.0.0") == "requests"

    def test_extras_only(self) -> None:
        """Test that extra-only requirements are skipped."""
        assert requirement_name("pytest ; extra == 'test'") is None

    def test_marker_not_matching(self) -> None:
        """Test that requirements for other environments are skipped."""
        assert requirement_name("legacy ; python_version < '3'") is None

    def test_malformed(self) -> None:
        """Test that malformed requirements are skipped."""
        assert requirement_name("not a requirement!!") is None


class TestEnvironmentLicenseSource:
    """Tests for EnvironmentLicenseSource."""

    @pytest.mark.asyncio
    async def test_direct_dependencies(self, tmp_path: Path) -> None:
        """Test a shallow scan reports the root and its direct requirements."""
        _write_project(tmp_path, PROJECT)

        with patch(
            "license_validator.sources.environment.distributions",
            return_value=INSTALLED,
        ):
            reports = await EnvironmentLicenseSource().find(tmp_path, max_depth=0)

        assert [report.identity for report in reports] == [
            "app@0.3.0",
            "alpha@1.2.0",
            "gamma@2.0.0",
            "delta@0.1.0",
        ]
        assert reports[0].licenses == ("MIT",)
        assert reports[1].licenses == ("ISC",)

    @pytest.mark.asyncio
    async def test_production_only(self, tmp_path: Path) -> None:
        """Test that optional and group requirements are skipped."""
        _write_project(tmp_path, PROJECT)

        with patch(
            "license_validator.sources.environment.distributions",
            return_value=INSTALLED,
        ):
            reports = await EnvironmentLicenseSource().find(
                tmp_path, max_depth=0, production_only=True
            )

        assert [report.name for report in reports] == ["app", "alpha"]

    @pytest.mark.asyncio
    async def test_deep_scan(self, tmp_path: Path) -> None:
        """Test that an unbounded scan follows transitive requirements."""
        _write_project(tmp_path, PROJECT)

        with patch(
            "license_validator.sources.environment.distributions",
            return_value=INSTALLED,
        ):
            reports = await EnvironmentLicenseSource().find(
                tmp_path, max_depth=None, production_only=True
            )

        assert [report.identity for report in reports] == [
            "app@0.3.0",
            "alpha@1.2.0",
            "epsilon@3.1.0",
            "zeta@1.0.0",
        ]

    @pytest.mark.asyncio
    async def test_limited_depth(self, tmp_path: Path) -> None:
        """Test that depth limits transitive traversal."""
        _write_project(tmp_path, PROJECT)

        with patch(
            "license_validator.sources.environment.distributions",
            return_value=INSTALLED,
        ):
            reports = await EnvironmentLicenseSource().find(
                tmp_path, max_depth=1, production_only=True
            )

        assert [report.name for report in reports] == ["app", "alpha", "epsilon"]

    @pytest.mark.asyncio
    async def test_root_without_version(self, tmp_path: Path) -> None:
        """Test that a root without a version is reported as unknown."""
        _write_project(tmp_path, '[project]\nname = "bare"\n')

        with patch(
            "license_validator.sources.environment.distributions", return_value=[]
        ):
            reports = await EnvironmentLicenseSource().find(tmp_path)

        assert [report.identity for report in reports] == ["bare@unknown"]
        assert reports[0].licenses == ()

    @pytest.mark.asyncio
    async def test_missing_manifest(self, tmp_path: Path) -> None:
        """Test that a missing manifest raises LicenseSourceError."""
        with pytest.raises(LicenseSourceError):
            await EnvironmentLicenseSource().find(tmp_path)
