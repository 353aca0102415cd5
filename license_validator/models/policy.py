"""Compiled policy models for license-validator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from license_validator.constants import EMPTY_WHITELIST


class PackageException(BaseModel):
    """A package allowed regardless of its license.

    Parsed from an ``allowed_packages`` entry in ``name`` or
    ``name@versionRange`` form.
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(description="Package name as written in the policy")
    version_range: str = Field(
        default="*",
        description="npm-style version range the package version must satisfy",
    )
    raw: str = Field(description="The allowed-package entry exactly as given")


class CompiledPolicy(BaseModel):
    """Lookup structures derived once per run from the allow-lists."""

    model_config = {"extra": "forbid", "frozen": True}

    license_lookup: dict[str, str] = Field(
        default_factory=dict,
        description="Lowercased allowed license -> license as configured",
    )
    spdx_whitelist_expression: str = Field(
        default=EMPTY_WHITELIST,
        description="OR-combination of every allowed license that is valid SPDX",
    )
    exceptions: dict[str, PackageException] = Field(
        default_factory=dict,
        description="Allowed packages keyed by lowercased package name",
    )

    @property
    def has_spdx_whitelist(self) -> bool:
        """Whether any allowed license made it into the SPDX expression."""
        return self.spdx_whitelist_expression != EMPTY_WHITELIST

    def find_exception(self, package_name: str) -> PackageException | None:
        """Look up the exception for a package name (case-insensitive)."""
        return self.exceptions.get(package_name.lower())
