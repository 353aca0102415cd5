"""Output formatters for license-validator."""

from license_validator.output.result_json import ResultJsonFormatter
from license_validator.output.terminal import TerminalFormatter, format_license_list

__all__ = [
    "ResultJsonFormatter",
    "TerminalFormatter",
    "format_license_list",
]
