"""License resolution logic for license-validator."""
from license_validator.analysis.compiler import compile_policy
from license_validator.analysis.engine import (
    match_license,
    resolve_package,
    resolve_reports,
)
from license_validator.analysis.spdx import (
    build_whitelist_expression,
    is_valid_expression,
    satisfies,
)
from license_validator.analysis.versions import (
    parse_package_spec,
    release_version,
    version_satisfies,
)

__all__ = [
    "build_whitelist_expression",
    "compile_policy",
    "is_valid_expression",
    "match_license",
    "parse_package_spec",
    "release_version",
    "resolve_package",
    "resolve_reports",
    "satisfies",
    "version_satisfies",
]
