"""Custom exceptions for license-validator."""


class LicenseValidatorError(Exception):
    """Base exception for all license-validator errors."""

    pass


class InvalidInputError(LicenseValidatorError):
    """Exception raised when arguments, options or upstream data are unusable."""

    pass


class EmptyResultError(InvalidInputError):
    """Exception raised when the license source reports no packages at all."""

    pass


class LicenseSourceError(LicenseValidatorError):
    """Exception raised when the bundled license source cannot crawl a project."""

    pass


class ConfigurationError(LicenseValidatorError):
    """Exception raised when configuration is invalid."""

    pass
