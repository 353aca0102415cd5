"""Resolution result models for license-validator."""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, Field


class Verdict(BaseModel):
    """Outcome of checking one package against the compiled policy."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(description="Package name")
    version: str = Field(description="Package version")
    matched_license: str = Field(
        description="License that satisfied the policy, the exception annotation, "
        "or the unmatched declared licenses when rejected",
    )
    accepted: bool = Field(description="Whether the package complies with the policy")
    exception: Optional[str] = Field(
        default=None,
        description="Allowed-package entry that accepted the package, if any",
    )

    @property
    def identity(self) -> str:
        """Package identity in ``name@version`` form."""
        return f"{self.name}@{self.version}"

    @property
    def via_exception(self) -> bool:
        """Check if the package was accepted through an allowed-package entry."""
        return self.exception is not None


class ResultSet(BaseModel):
    """Aggregate of all verdicts for a run."""

    model_config = {"extra": "forbid", "frozen": True}

    licenses: list[str] = Field(
        default_factory=list,
        description="Distinct matched or rejected license strings, ordinal sort",
    )
    packages: dict[str, str] = Field(
        default_factory=dict,
        description="Package identity -> matched license or exception string",
    )
    invalid_packages: list[str] = Field(
        default_factory=list,
        description="Identities of packages that failed the policy, in report order",
    )
    license_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Number of packages per matched or rejected license string",
    )
    verdicts: list[Verdict] = Field(
        default_factory=list,
        description="Per-package verdicts, in report order",
    )

    @property
    def has_violations(self) -> bool:
        """Check if any package failed the policy."""
        return len(self.invalid_packages) > 0

    @property
    def total_packages(self) -> int:
        """Number of distinct packages resolved."""
        return len(self.packages)

    @classmethod
    def from_verdicts(cls, verdicts: Sequence[Verdict]) -> ResultSet:
        """Fold verdicts into a result set.

        Every verdict's matched value is tallied, rejected ones included,
        so the license list shows everything that was seen.

        Args:
            verdicts: Verdicts in report order.

        Returns:
            ResultSet with sorted licenses and de-duplicated invalid packages.
        """
        packages: dict[str, str] = {}
        counts: dict[str, int] = {}
        invalid: list[str] = []

        for verdict in verdicts:
            identity = verdict.identity
            packages[identity] = verdict.matched_license
            counts[verdict.matched_license] = counts.get(verdict.matched_license, 0) + 1
            if not verdict.accepted and identity not in invalid:
                invalid.append(identity)

        ordered = sorted(counts)
        return cls(
            licenses=ordered,
            packages=packages,
            invalid_packages=invalid,
            license_counts={license: counts[license] for license in ordered},
            verdicts=list(verdicts),
        )
