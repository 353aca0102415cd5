"""Tests for policy compilation."""
import pytest
from pydantic import ValidationError

from license_validator.analysis.compiler import compile_policy
from license_validator.exceptions import InvalidInputError


class TestCompilePolicy:
    """Tests for compile_policy function."""

    def test_license_lookup_is_lowercased(self) -> None:
        """Test that allowed licenses are keyed by lowercase form."""
        policy = compile_policy(["MIT", "Apache-2.0"], [])

        assert policy.license_lookup == {"mit": "MIT", "apache-2.0": "Apache-2.0"}

    def test_later_license_overwrites_same_lowercase(self) -> None:
        """Test that a later entry with the same lowercase form wins."""
        policy = compile_policy(["MIT", "mit"], [])

        assert policy.license_lookup == {"mit": "mit"}

    def test_no_whitespace_normalisation(self) -> None:
        """Test that only case is normalised in the lookup."""
        policy = compile_policy(["MIT License "], [])

        assert "mit license " in policy.license_lookup
        assert "mit license" not in policy.license_lookup

    def test_whitelist_expression_built(self) -> None:
        """Test that valid SPDX licenses form the whitelist expression."""
        policy = compile_policy(["MIT", "random thing", "ISC"], [])

        assert policy.spdx_whitelist_expression == "(MIT OR ISC)"
        assert policy.has_spdx_whitelist is True

    def test_empty_whitelist_expression(self) -> None:
        """Test that no valid SPDX licenses gives an empty whitelist."""
        policy = compile_policy(["random thing"], ["foo"])

        assert policy.spdx_whitelist_expression == "()"
        assert policy.has_spdx_whitelist is False
        assert policy.license_lookup == {"random thing": "random thing"}

    def test_exceptions_keyed_by_lowercase_name(self) -> None:
        """Test that package exceptions are keyed case-insensitively."""
        policy = compile_policy([], ["Foo@^1.0.0", "bar"])

        assert set(policy.exceptions) == {"foo", "bar"}
        assert policy.find_exception("FOO") is not None
        assert policy.find_exception("foo").raw == "Foo@^1.0.0"
        assert policy.find_exception("bar").version_range == "*"
        assert policy.find_exception("baz") is None

    def test_duplicate_package_warns_once(self) -> None:
        """Test that a duplicated package produces exactly one warning."""
        warnings: list[str] = []

        compile_policy(["MIT"], ["foo", "foo"], warn=warnings.append)

        assert len(warnings) == 1
        assert "specified more than once" in warnings[0]
        assert "foo" in warnings[0]

    def test_duplicate_package_later_entry_wins(self) -> None:
        """Test that the later duplicate replaces the earlier one."""
        policy = compile_policy([], ["foo@^1.0.0", "foo@^2.0.0"])

        assert policy.find_exception("foo").version_range == "^2.0.0"

    def test_no_warning_for_distinct_packages(self) -> None:
        """Test that distinct packages do not warn."""
        warnings: list[str] = []

        compile_policy([], ["foo", "bar@1.x"], warn=warnings.append)

        assert warnings == []

    def test_duplicates_without_callback(self) -> None:
        """Test that duplicates are tolerated without a warn callback."""
        policy = compile_policy([], ["foo", "foo"])

        assert list(policy.exceptions) == ["foo"]

    def test_invalid_package_spec_raises(self) -> None:
        """Test that unparseable package entries fail compilation."""
        with pytest.raises(InvalidInputError):
            compile_policy([], ["foo@garbage range"])

    def test_compiled_policy_is_frozen(self) -> None:
        """Test that the compiled policy cannot be reassigned."""
        policy = compile_policy(["MIT"], [])

        with pytest.raises(ValidationError):
            policy.spdx_whitelist_expression = "(ISC)"  # type: ignore[misc]
