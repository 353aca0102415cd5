"""Resolution engine: per-package verdicts against a compiled policy.

Each package is resolved on its own from its declared licenses and the
read-only compiled policy:

1. Declared licenses are tried in order. A license that is a valid SPDX
   expression is checked against the whitelist expression; otherwise (or
   if that fails) it is compared case-insensitively with the allowed
   license strings. The first hit is recorded as declared.
2. Failing that, an allowed-package entry for the package name whose
   version range contains the package version accepts it.
3. Otherwise the package is rejected.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

from pydantic import ValidationError

from license_validator.analysis.compiler import WarnCallback, ignore_warning
from license_validator.analysis.spdx import is_valid_expression, satisfies
from license_validator.analysis.versions import version_satisfies
from license_validator.exceptions import EmptyResultError, InvalidInputError
from license_validator.models.policy import CompiledPolicy
from license_validator.models.report import LicenseReport
from license_validator.models.result import ResultSet, Verdict


def match_license(
    licenses: Sequence[str], policy: CompiledPolicy
) -> Optional[str]:
    """Find the first declared license the policy accepts.

    Args:
        licenses: Declared license strings, in declaration order.
        policy: Compiled policy.

    Returns:
        The declared license string as written, or None if none matched.
    """
    for candidate in licenses:
        if (
            policy.has_spdx_whitelist
            and is_valid_expression(candidate)
            and satisfies(candidate, policy.spdx_whitelist_expression)
        ):
            return candidate

        if candidate.lower() in policy.license_lookup:
            return candidate

    return None


def resolve_package(report: LicenseReport, policy: CompiledPolicy) -> Verdict:
    """Resolve a single package against the policy.

    Args:
        report: Declared licenses for the package.
        policy: Compiled policy.

    Returns:
        Verdict for the package.
    """
    matched = match_license(report.licenses, policy)
    if matched is not None:
        return Verdict(
            name=report.name,
            version=report.version,
            matched_license=matched,
            accepted=True,
        )

    exception = policy.find_exception(report.name)
    if exception is not None and version_satisfies(
        report.version, exception.version_range
    ):
        return Verdict(
            name=report.name,
            version=report.version,
            matched_license=f"{report.license_display} (exception: {exception.raw})",
            accepted=True,
            exception=exception.raw,
        )

    return Verdict(
        name=report.name,
        version=report.version,
        matched_license=report.license_display,
        accepted=False,
    )


def _coerce_reports(reports: Any) -> list[LicenseReport]:
    """Validate the shape of license source output.

    Raises:
        InvalidInputError: If the data is not a sequence of reports.
        EmptyResultError: If the sequence is empty.
    """
    if reports is None or isinstance(reports, (str, bytes, dict)):
        raise InvalidInputError("license source returned invalid data")
    if not isinstance(reports, (list, tuple)):
        raise InvalidInputError("license source returned invalid data")
    if len(reports) == 0:
        raise EmptyResultError("license source found no licenses")

    coerced: list[LicenseReport] = []
    for item in reports:
        if isinstance(item, LicenseReport):
            coerced.append(item)
            continue
        try:
            coerced.append(LicenseReport.model_validate(item))
        except ValidationError as e:
            raise InvalidInputError(
                f"license source returned invalid data: {item!r}"
            ) from e
    return coerced


def resolve_reports(
    reports: Sequence[LicenseReport],
    policy: CompiledPolicy,
    warn: Optional[WarnCallback] = None,
) -> ResultSet:
    """Resolve every reported package and aggregate the verdicts.

    After resolution, allowed packages that never appeared in the report
    produce a single warning listing them.

    Args:
        reports: License reports from the license source.
        policy: Compiled policy.
        warn: Optional callback receiving advisory messages.

    Returns:
        ResultSet for the run.

    Raises:
        InvalidInputError: If the reports are not a sequence of reports.
        EmptyResultError: If there are no reports.
    """
    warn = warn or ignore_warning
    validated = _coerce_reports(reports)

    verdicts = [resolve_package(report, policy) for report in validated]

    seen = {report.name.lower() for report in validated}
    unseen = [
        exception.name
        for key, exception in policy.exceptions.items()
        if key not in seen
    ]
    if unseen:
        warn(
            "Packages were listed as exception but not present in the project: "
            f"{', '.join(unseen)}"
        )

    return ResultSet.from_verdicts(verdicts)
