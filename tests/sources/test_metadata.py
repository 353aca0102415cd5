"""Tests for declared license extraction."""
from email.message import Message

from license_validator.sources.metadata import (
    licenses_from_metadata,
    licenses_from_project,
)


def _message(**fields: object) -> Message:
    message = Message()
    for field, value in fields.items():
        header = field.replace("_", "-")
        for item in value if isinstance(value, list) else [value]:
            message[header] = item
    return message


class TestLicensesFromMetadata:
    """Tests for licenses_from_metadata function."""

    def test_license_expression_preferred(self) -> None:
        """Test that License-Expression wins over License."""
        metadata = {"License-Expression": "MIT OR Apache-2.0", "License": "MIT"}

        assert licenses_from_metadata(metadata) == ["MIT OR Apache-2.0"]

    def test_license_field(self) -> None:
        """Test that a one-line License field is used."""
        assert licenses_from_metadata({"License": "BSD-3-Clause"}) == ["BSD-3-Clause"]

    def test_placeholder_license_ignored(self) -> None:
        """Test that UNKNOWN is not treated as a license."""
        assert licenses_from_metadata({"License": "UNKNOWN"}) == []

    def test_license_text_ignored(self) -> None:
        """Test that a pasted license text is not treated as a license."""
        metadata = {"License": "Copyright (c) 2020\n\nPermission is hereby granted"}

        assert licenses_from_metadata(metadata) == []

    def test_classifiers_appended(self) -> None:
        """Test that classifier licenses follow the declared field."""
        metadata = _message(
            License="Apache 2.0",
            Classifier=[
                "Programming Language :: Python :: 3",
                "License :: OSI Approved :: Apache Software License",
                "License :: OSI Approved :: MIT License",
            ],
        )

        assert licenses_from_metadata(metadata) == ["Apache 2.0", "Apache-2.0", "MIT"]

    def test_classifier_duplicates_dropped(self) -> None:
        """Test that a classifier repeating the field is not added twice."""
        metadata = _message(
            License_Expression="MIT",
            Classifier="License :: OSI Approved :: MIT License",
        )

        assert licenses_from_metadata(metadata) == ["MIT"]

    def test_nothing_declared(self) -> None:
        """Test that missing fields give an empty list."""
        assert licenses_from_metadata(_message(Name="foo")) == []


class TestLicensesFromProject:
    """Tests for licenses_from_project function."""

    def test_string_license(self) -> None:
        """Test the PEP 639 string form."""
        assert licenses_from_project({"license": "MIT"}) == ["MIT"]

    def test_table_license(self) -> None:
        """Test the older table form."""
        assert licenses_from_project({"license": {"text": "ISC"}}) == ["ISC"]

    def test_file_license_ignored(self) -> None:
        """Test that file references declare nothing."""
        assert licenses_from_project({"license": {"file": "LICENSE"}}) == []

    def test_classifiers(self) -> None:
        """Test that project classifiers are mapped."""
        project = {
            "license": "MIT",
            "classifiers": ["License :: OSI Approved :: ISC License (ISCL)"],
        }

        assert licenses_from_project(project) == ["MIT", "ISC"]
