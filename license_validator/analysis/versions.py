"""Allowed-package specs and version range matching.

Ranges use npm semver syntax (``^1.0.0``, ``~1.2``, ``1.x || >=2.5.0``,
``1.0.0 - 2.0.0``) via semantic_version's NpmSpec. Package versions are
reduced to their release part first, since "any version" ranges do not
match pre-release versions under semver rules.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

import semantic_version
from packaging.version import InvalidVersion, Version

from license_validator.exceptions import InvalidInputError
from license_validator.models.policy import PackageException
from license_validator.models.report import split_identity

ANY_VERSION = "*"

# Pre-release and build qualifiers in semver form
_QUALIFIERS = re.compile(r"[-+].*$")


@lru_cache(maxsize=256)
def compile_range(version_range: str) -> semantic_version.NpmSpec:
    """Parse an npm-style version range.

    Args:
        version_range: Range expression; empty means any version.

    Returns:
        NpmSpec for the range.

    Raises:
        ValueError: If the range cannot be parsed.
    """
    return semantic_version.NpmSpec(version_range.strip() or ANY_VERSION)


def release_version(version: str) -> Optional[semantic_version.Version]:
    """Reduce a package version to its release part.

    ``1.0.0-beta.1``, ``1.0.0+build`` and PEP 440 forms such as
    ``1.0.0rc1`` all become ``1.0.0``. Short versions are padded
    (``2024.1`` -> ``2024.1.0``).

    Args:
        version: Version string as reported for the package.

    Returns:
        semantic_version.Version, or None if the string is not a version.
    """
    stripped = _QUALIFIERS.sub("", version.strip())
    try:
        stripped = Version(stripped).base_version
    except InvalidVersion:
        pass

    try:
        return semantic_version.Version.coerce(stripped)
    except ValueError:
        return None


def version_satisfies(version: str, version_range: str) -> bool:
    """Check if a package version satisfies an npm-style range.

    Args:
        version: Package version.
        version_range: Range to check against.

    Returns:
        True if the release part of the version is inside the range.
        Unparseable versions or ranges never match.
    """
    release = release_version(version)
    if release is None:
        return False
    try:
        spec = compile_range(version_range)
    except ValueError:
        return False
    return spec.match(release)


def parse_package_spec(spec: str) -> PackageException:
    """Parse an allowed-package entry.

    Args:
        spec: Entry in ``name`` or ``name@versionRange`` form.

    Returns:
        PackageException; the range defaults to ``*`` when omitted.

    Raises:
        InvalidInputError: If the name is empty or the range is not valid.
    """
    if not isinstance(spec, str) or not spec.strip():
        raise InvalidInputError(f"invalid allowed package: {spec!r}")

    name, version_range = split_identity(spec)
    if not name:
        raise InvalidInputError(f"invalid allowed package: {spec!r}")

    version_range = version_range or ANY_VERSION
    try:
        compile_range(version_range)
    except ValueError as e:
        raise InvalidInputError(
            f"invalid version range in allowed package '{spec}': {e}"
        ) from e

    return PackageException(name=name, version_range=version_range, raw=spec.strip())
