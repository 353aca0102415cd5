"""JSON output formatter for validation results."""
import json
from datetime import datetime, timezone
from typing import Any

from license_validator import __version__
from license_validator.constants import LEGAL_DISCLAIMER
from license_validator.models.result import ResultSet


class ResultJsonFormatter:
    """Format validation results as JSON for CI/CD integration."""

    def format_result(self, result: ResultSet, list_only: bool = False) -> str:
        """Format a validation result as a JSON string.

        Args:
            result: The result to format.
            list_only: Whether the run only enumerates licenses.

        Returns:
            JSON string representation of the result.
        """
        output = {
            "validation_metadata": self._build_metadata(list_only),
            "summary": self._build_summary(result, list_only),
            "licenses": result.licenses,
            "license_counts": result.license_counts,
            "packages": dict(sorted(result.packages.items())),
            "invalid_packages": result.invalid_packages,
        }
        return json.dumps(output, indent=2)

    def _build_metadata(self, list_only: bool) -> dict[str, Any]:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return {
            "generated_at": timestamp,
            "tool_version": __version__,
            "mode": "list" if list_only else "validate",
            "disclaimer": LEGAL_DISCLAIMER,
        }

    def _build_summary(self, result: ResultSet, list_only: bool) -> dict[str, Any]:
        if list_only:
            status = "LISTED"
        elif result.has_violations:
            status = "INVALID"
        else:
            status = "PASS"

        return {
            "total_packages": result.total_packages,
            "distinct_licenses": len(result.licenses),
            "invalid_count": len(result.invalid_packages),
            "exceptions_applied": sum(1 for v in result.verdicts if v.via_exception),
            "status": status,
        }
