"""License report models produced by license sources."""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field

from license_validator.exceptions import InvalidInputError


def split_identity(identity: str) -> tuple[str, str]:
    """Split a ``name@version`` identity into its name and version.

    Scoped names such as ``@scope/name@1.0.0`` keep their leading ``@``.

    Args:
        identity: Package identity string.

    Returns:
        Tuple of (name, version). Version is empty when absent.
    """
    identity = identity.strip()
    separator = identity.find("@", 1)
    if separator == -1:
        return identity, ""
    return identity[:separator], identity[separator + 1 :].strip()


class LicenseReport(BaseModel):
    """Declared licenses for one resolved package version.

    ``licenses`` holds the license strings in the order the package's own
    metadata declares them. Entries may be SPDX expressions or free text.
    """

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(min_length=1, description="Package name")
    version: str = Field(description="Exact package version")
    licenses: tuple[str, ...] = Field(
        default=(),
        description="Declared license strings, in declaration order",
    )

    @property
    def identity(self) -> str:
        """Package identity in ``name@version`` form."""
        return f"{self.name}@{self.version}"

    @property
    def license_display(self) -> str:
        """All declared licenses joined the way reports print them."""
        return ", ".join(self.licenses)

    @classmethod
    def from_identity(cls, identity: str, licenses: Sequence[str]) -> LicenseReport:
        """Build a report from a ``name@version`` identity.

        Args:
            identity: Package identity, e.g. ``foo@1.2.0``.
            licenses: Declared license strings.

        Returns:
            LicenseReport for the package.

        Raises:
            InvalidInputError: If the identity has no name or no version.
        """
        name, version = split_identity(identity)
        if not name or not version:
            raise InvalidInputError(f"invalid package identity: {identity!r}")
        return cls(name=name, version=version, licenses=tuple(licenses))
