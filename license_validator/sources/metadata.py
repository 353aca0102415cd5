"""Declared license extraction from package metadata."""

from typing import Any, Optional

# Trove classifiers mapped to SPDX identifiers
CLASSIFIER_TO_SPDX: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: MIT No Attribution License (MIT-0)": "MIT-0",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": "GPL-2.0",
    "License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)": (
        "GPL-2.0+"
    ),
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": "GPL-3.0",
    "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)": (
        "GPL-3.0+"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0"
    ),
    "License :: OSI Approved :: GNU Affero General Public License v3": "AGPL-3.0",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
    "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication": "CC0-1.0",
}

# License field values that mean "nothing declared"
_PLACEHOLDERS = ("UNKNOWN", "NONE", "")


def _clean_license_field(value: Optional[str]) -> Optional[str]:
    """Keep a License field only if it names a license rather than quoting one."""
    if not value:
        return None
    cleaned = value.strip()
    if cleaned.upper() in _PLACEHOLDERS:
        return None
    # Full license texts are pasted into this field surprisingly often
    if "\n" in cleaned:
        return None
    return cleaned


def _get_all(metadata: Any, field: str) -> list[str]:
    getter = getattr(metadata, "get_all", None)
    if callable(getter):
        return list(getter(field) or [])
    value = metadata.get(field)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _with_classifiers(declared: list[str], classifiers: list[str]) -> list[str]:
    for classifier in classifiers:
        spdx_id = CLASSIFIER_TO_SPDX.get(classifier.strip())
        if spdx_id and spdx_id not in declared:
            declared.append(spdx_id)
    return declared


def licenses_from_metadata(metadata: Any) -> list[str]:
    """Extract declared licenses from installed distribution metadata.

    Order: ``License-Expression`` (PEP 639), otherwise a one-line
    ``License`` field, followed by licenses named by trove classifiers.

    Args:
        metadata: ``importlib.metadata`` metadata (or any mapping with the
            same field names).

    Returns:
        Declared license strings without duplicates. May be empty.
    """
    declared: list[str] = []

    expression = metadata.get("License-Expression")
    if expression and expression.strip():
        declared.append(expression.strip())
    else:
        license_field = _clean_license_field(metadata.get("License"))
        if license_field:
            declared.append(license_field)

    return _with_classifiers(declared, _get_all(metadata, "Classifier"))


def licenses_from_project(project: dict[str, Any]) -> list[str]:
    """Extract declared licenses from a pyproject ``[project]`` table.

    Handles both the PEP 639 string form (``license = "MIT"``) and the
    older table form (``license = {text = "MIT"}``). File references are
    ignored.

    Args:
        project: The ``[project]`` table.

    Returns:
        Declared license strings without duplicates. May be empty.
    """
    declared: list[str] = []

    license_value = project.get("license")
    if isinstance(license_value, str):
        if license_value.strip():
            declared.append(license_value.strip())
    elif isinstance(license_value, dict):
        text = _clean_license_field(license_value.get("text"))
        if text:
            declared.append(text)

    return _with_classifiers(declared, list(project.get("classifiers", [])))
