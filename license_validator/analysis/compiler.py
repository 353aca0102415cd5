"""Policy compilation: allow-lists into lookup structures."""
from __future__ import annotations

from typing import Callable, Optional, Sequence

from license_validator.analysis.spdx import build_whitelist_expression
from license_validator.analysis.versions import parse_package_spec
from license_validator.models.policy import CompiledPolicy, PackageException

WarnCallback = Callable[[str], None]


def ignore_warning(message: str) -> None:
    """Default warn callback: discard the message."""


def compile_policy(
    allowed_licenses: Sequence[str],
    allowed_packages: Sequence[str],
    warn: Optional[WarnCallback] = None,
) -> CompiledPolicy:
    """Compile allowed licenses and packages into a CompiledPolicy.

    License lookup is keyed by the lowercased license string; a later entry
    with the same lowercased form replaces an earlier one. No other
    normalisation is applied.

    A package listed more than once triggers a warning and the later entry
    wins.

    Args:
        allowed_licenses: License strings to accept.
        allowed_packages: Entries in ``name`` or ``name@versionRange`` form.
        warn: Optional callback receiving advisory messages.

    Returns:
        CompiledPolicy for the run.

    Raises:
        InvalidInputError: If an allowed package entry cannot be parsed.
    """
    warn = warn or ignore_warning

    license_lookup: dict[str, str] = {}
    for license in allowed_licenses:
        license_lookup[license.lower()] = license

    exceptions: dict[str, PackageException] = {}
    for spec in allowed_packages:
        exception = parse_package_spec(spec)
        key = exception.name.lower()
        if key in exceptions:
            warn(
                f"{exception.name} is specified more than once in allowed packages. "
                "Use a single entry with the `||` range operator to allow "
                "multiple versions of one package."
            )
        exceptions[key] = exception

    return CompiledPolicy(
        license_lookup=license_lookup,
        spdx_whitelist_expression=build_whitelist_expression(allowed_licenses),
        exceptions=exceptions,
    )
