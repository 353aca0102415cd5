"""License sources for license-validator."""

from license_validator.sources.base import LicenseSource
from license_validator.sources.environment import EnvironmentLicenseSource

__all__ = [
    "EnvironmentLicenseSource",
    "LicenseSource",
]
