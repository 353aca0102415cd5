"""License source backed by the current Python environment.

Reads the project's ``pyproject.toml`` for the root package and its direct
requirements, then follows ``Requires-Dist`` through the installed
distributions.
"""
from __future__ import annotations

import asyncio
import tomllib
from collections import deque
from importlib.metadata import Distribution, distributions
from pathlib import Path
from typing import Any, Optional

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from license_validator.exceptions import LicenseSourceError
from license_validator.models.report import LicenseReport
from license_validator.sources.base import LicenseSource
from license_validator.sources.metadata import (
    licenses_from_metadata,
    licenses_from_project,
)

MANIFEST_NAME = "pyproject.toml"


def load_manifest(directory: Path) -> dict[str, Any]:
    """Read and parse ``pyproject.toml`` from a project directory.

    Args:
        directory: Project root directory.

    Returns:
        Parsed TOML document.

    Raises:
        LicenseSourceError: If the file is missing, unreadable or invalid.
    """
    manifest_path = directory / MANIFEST_NAME
    if not manifest_path.is_file():
        raise LicenseSourceError(f"No {MANIFEST_NAME} file found in {directory}")

    try:
        content = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LicenseSourceError(f"Cannot read '{manifest_path}': {e}") from e

    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise LicenseSourceError(f"Invalid TOML in '{manifest_path}': {e}") from e


def direct_requirements(manifest: dict[str, Any], production_only: bool) -> list[str]:
    """List the root project's direct requirement strings.

    Runtime dependencies always count. Unless ``production_only`` is set,
    optional dependencies and PEP 735 dependency groups are added too.
    """
    project = manifest.get("project") or {}
    requirements = [req for req in project.get("dependencies", []) if isinstance(req, str)]

    if production_only:
        return requirements

    for extra_requirements in (project.get("optional-dependencies") or {}).values():
        requirements.extend(req for req in extra_requirements if isinstance(req, str))

    # Group entries can also be {include-group = "..."} tables
    for group in (manifest.get("dependency-groups") or {}).values():
        requirements.extend(req for req in group if isinstance(req, str))

    return requirements


def _is_extras_only_marker(marker: Optional[object]) -> bool:
    """Check if a marker restricts the requirement to an extra."""
    if marker is None:
        return False
    return "extra" in str(marker)


def requirement_name(req_str: str) -> Optional[str]:
    """Get the package name a requirement applies to in this environment.

    Args:
        req_str: Requirement string (e.g., "requests>=2.0.0").

    Returns:
        The requirement's name, or None if it is malformed, its marker does
        not match the current environment, or it only applies to an extra.
    """
    try:
        req = Requirement(req_str)
    except InvalidRequirement:
        return None

    if _is_extras_only_marker(req.marker):
        return None
    if req.marker and not req.marker.evaluate():
        return None
    return req.name


class EnvironmentLicenseSource(LicenseSource):
    """Report licenses of a project's requirements installed in this environment."""

    def __init__(self, search_paths: Optional[list[str]] = None) -> None:
        """Initialize the source.

        Args:
            search_paths: Optional directories to look for distributions in.
                Defaults to ``sys.path``.
        """
        self._search_paths = search_paths

    def _installed(self) -> dict[str, Distribution]:
        found = (
            distributions(path=self._search_paths)
            if self._search_paths
            else distributions()
        )
        installed: dict[str, Distribution] = {}
        for dist in found:
            name = dist.metadata.get("Name")
            if name:
                installed.setdefault(canonicalize_name(name), dist)
        return installed

    async def find(
        self,
        directory: Path,
        max_depth: Optional[int] = 0,
        production_only: bool = False,
    ) -> list[LicenseReport]:
        """Collect license reports for the project in ``directory``.

        Raises:
            LicenseSourceError: If the project manifest cannot be read.
        """
        return await asyncio.to_thread(
            self._crawl, Path(directory), max_depth, production_only
        )

    def _crawl(
        self,
        directory: Path,
        max_depth: Optional[int],
        production_only: bool,
    ) -> list[LicenseReport]:
        manifest = load_manifest(directory)
        project = manifest.get("project") or {}
        installed = self._installed()

        root_name = str(project.get("name") or directory.resolve().name)
        root_dist = installed.get(canonicalize_name(root_name))
        root_version = project.get("version")
        if not root_version and root_dist is not None:
            root_version = root_dist.metadata.get("Version")

        reports = [
            LicenseReport(
                name=root_name,
                version=str(root_version or "unknown"),
                licenses=tuple(licenses_from_project(project)),
            )
        ]
        visited = {canonicalize_name(root_name)}

        # Breadth-first so each package is reported at its shallowest depth
        queue = deque(
            (req_str, 0) for req_str in direct_requirements(manifest, production_only)
        )
        while queue:
            req_str, depth = queue.popleft()
            name = requirement_name(req_str)
            if name is None:
                continue

            normalized = canonicalize_name(name)
            if normalized in visited:
                continue
            dist = installed.get(normalized)
            if dist is None:
                continue  # Package not installed
            visited.add(normalized)

            reports.append(self._report_for(dist))

            if max_depth is None or depth < max_depth:
                queue.extend((child, depth + 1) for child in dist.requires or [])

        return reports

    @staticmethod
    def _report_for(dist: Distribution) -> LicenseReport:
        metadata = dist.metadata
        return LicenseReport(
            name=metadata.get("Name"),
            version=metadata.get("Version", "unknown"),
            licenses=tuple(licenses_from_metadata(metadata)),
        )
