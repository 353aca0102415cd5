"""Pydantic data models for license-validator."""

from license_validator.models.config import ValidatorConfig, Verbosity
from license_validator.models.policy import CompiledPolicy, PackageException
from license_validator.models.report import LicenseReport
from license_validator.models.result import ResultSet, Verdict

__all__ = [
    "CompiledPolicy",
    "LicenseReport",
    "PackageException",
    "ResultSet",
    "ValidatorConfig",
    "Verbosity",
    "Verdict",
]
