"""Configuration Pydantic models for license-validator."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class ValidatorConfig(BaseModel):
    """Every option a validation run recognises.

    Loaded from a configuration file and/or the command line. All fields
    have defaults so partial configuration is allowed.
    """

    model_config = {"extra": "forbid"}

    allowed_licenses: List[str] = Field(
        default_factory=list,
        description="License strings to accept. Matching is case-insensitive; "
        "valid SPDX identifiers also take part in SPDX expression matching.",
    )
    allowed_packages: List[str] = Field(
        default_factory=list,
        description="Packages to accept regardless of license, as `name` or "
        "`name@versionRange`.",
    )
    list_only: bool = Field(
        default=False,
        description="Only enumerate licenses; violations are informational.",
    )
    production_only: bool = Field(
        default=False,
        description="Skip development dependencies.",
    )
    deep_scan: bool = Field(
        default=False,
        description="Traverse the full transitive dependency closure.",
    )

    @property
    def max_depth(self) -> Optional[int]:
        """Traversal depth handed to the license source (None = unbounded)."""
        return None if self.deep_scan else 0

    @property
    def has_policy(self) -> bool:
        """Whether any allowed license or package is configured."""
        return bool(self.allowed_licenses) or bool(self.allowed_packages)

    def merged_with(
        self,
        allowed_licenses: Sequence[str] = (),
        allowed_packages: Sequence[str] = (),
        list_only: bool = False,
        production_only: bool = False,
        deep_scan: bool = False,
    ) -> ValidatorConfig:
        """Layer command-line values over this configuration.

        Non-empty lists replace the configured lists; flags that are set
        switch the option on.

        Returns:
            New ValidatorConfig with the overrides applied.
        """
        return self.model_copy(
            update={
                "allowed_licenses": list(allowed_licenses) or self.allowed_licenses,
                "allowed_packages": list(allowed_packages) or self.allowed_packages,
                "list_only": self.list_only or list_only,
                "production_only": self.production_only or production_only,
                "deep_scan": self.deep_scan or deep_scan,
            }
        )
