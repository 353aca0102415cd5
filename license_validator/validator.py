"""Validation runs: argument checks, license source call, resolution pass."""
from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Any, Optional

from license_validator.analysis.compiler import WarnCallback, compile_policy
from license_validator.analysis.engine import resolve_reports
from license_validator.exceptions import InvalidInputError
from license_validator.models.config import ValidatorConfig
from license_validator.models.policy import CompiledPolicy
from license_validator.models.result import ResultSet
from license_validator.sources.base import LicenseSource
from license_validator.sources.environment import EnvironmentLicenseSource


def _validate_root_dir(root_dir: Any) -> Path:
    """Check that the project root exists and is a directory.

    Raises:
        InvalidInputError: If the path is missing, unusable or not a directory.
    """
    if not isinstance(root_dir, (str, os.PathLike)):
        raise InvalidInputError(f"invalid root dir: {root_dir!r}")

    path = Path(root_dir)
    try:
        mode = path.stat().st_mode
    except OSError as e:
        raise InvalidInputError(f"invalid root dir: {root_dir}: {e}") from e

    if not stat.S_ISDIR(mode):
        raise InvalidInputError(f"not a directory: {root_dir}")
    return path


class LicenseValidator:
    """Validates the licenses of one project against a policy.

    All argument checks and policy compilation happen in the constructor,
    before any I/O, so bad input fails immediately. ``run()`` performs the
    single license source call followed by one resolution pass.
    """

    def __init__(
        self,
        root_dir: Any,
        config: ValidatorConfig,
        source: Optional[LicenseSource] = None,
        warn: Optional[WarnCallback] = None,
    ) -> None:
        """Check arguments and compile the policy.

        Args:
            root_dir: Project root directory.
            config: Options for the run.
            source: License source; defaults to EnvironmentLicenseSource.
            warn: Optional callback receiving advisory messages.

        Raises:
            InvalidInputError: If any argument is unusable, or no allowed
                licenses or packages are configured outside list-only mode.
        """
        self._root_dir = _validate_root_dir(root_dir)

        if not isinstance(config, ValidatorConfig):
            raise InvalidInputError(f"invalid options: {config!r}")
        if warn is not None and not callable(warn):
            raise InvalidInputError(f"warn callback is not callable: {warn!r}")
        if not config.list_only and not config.has_policy:
            raise InvalidInputError("no licenses or packages specified")

        self._config = config
        self._source = source if source is not None else EnvironmentLicenseSource()
        self._warn = warn
        self._policy = compile_policy(
            config.allowed_licenses, config.allowed_packages, warn=warn
        )

    @property
    def root_dir(self) -> Path:
        """Validated project root."""
        return self._root_dir

    @property
    def policy(self) -> CompiledPolicy:
        """Policy compiled for this run."""
        return self._policy

    async def run(self) -> ResultSet:
        """Collect license reports and resolve them against the policy.

        Returns:
            ResultSet for the project.

        Raises:
            InvalidInputError: If the license source returns unusable data.
            EmptyResultError: If the license source reports no packages.
        """
        reports = await self._source.find(
            self._root_dir,
            max_depth=self._config.max_depth,
            production_only=self._config.production_only,
        )
        return resolve_reports(reports, self._policy, warn=self._warn)


async def validate(
    root_dir: Any,
    config: ValidatorConfig,
    source: Optional[LicenseSource] = None,
    warn: Optional[WarnCallback] = None,
) -> ResultSet:
    """Validate a project's licenses in one call.

    See LicenseValidator for argument handling and errors.
    """
    return await LicenseValidator(root_dir, config, source=source, warn=warn).run()
