"""SPDX expression validation and satisfaction checks.

Uses the license-expression library for SPDX parsing. An expression is
reduced to disjunctive normal form: a list of alternatives, each a set of
licenses that must all be accepted. A package expression is satisfied by
the whitelist when one of its alternatives is fully covered.

Version ranges are honoured: ``GPL-2.0+`` (``GPL-2.0-or-later``) is
covered by any allowed GPL version from 2.0 up, and an allowed
``GPL-2.0-or-later`` covers any GPL version from 2.0 up. A ``+`` suffix
works on any versioned key, e.g. ``Apache-2.0+``. ``WITH``
exceptions must match exactly.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, NamedTuple, Optional

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    ParseError,
    get_spdx_licensing,
)

from license_validator.constants import EMPTY_WHITELIST

# Initialize SPDX licensing for parsing
_licensing = get_spdx_licensing()

_VERSIONED_KEY = re.compile(
    r"^(?P<family>.+?)-(?P<version>\d+(?:\.\d+)*)(?P<suffix>-only|-or-later)?$"
)


def _build_key_index() -> dict[str, str]:
    """Map lowercased SPDX keys and their aliases to the canonical key."""
    index: dict[str, str] = {}
    for symbol in _licensing.known_symbols.values():
        index[symbol.key.lower()] = symbol.key
    for symbol in _licensing.known_symbols.values():
        for alias in symbol.aliases or ():
            index.setdefault(alias.lower(), symbol.key)
    return index


_KNOWN_KEYS = _build_key_index()


class LicenseTerm(NamedTuple):
    """A single license, optionally with an exception, taken from an expression.

    Attributes:
        key: Lowercased canonical SPDX key, with ``+`` kept when given.
        family: Lowercased key without version (same as key if unversioned).
        version: Numeric version, padded to three parts, or None.
        or_later: Whether the term means "this version or any later one".
        exception: Lowercased exception key for ``WITH`` terms.
    """

    key: str
    family: str
    version: Optional[tuple[int, ...]]
    or_later: bool
    exception: Optional[str]


def _resolve_key(key: str) -> tuple[str, bool]:
    """Resolve a symbol key to its canonical SPDX key.

    A trailing ``+`` on a known key (``Apache-2.0+``) is accepted even when
    the license list has no or-later alias for it.

    Returns:
        Tuple of (canonical key, whether a ``+`` suffix was stripped).

    Raises:
        ExpressionError: If the key is not a known SPDX identifier.
    """
    lowered = key.strip().lower()
    if lowered in _KNOWN_KEYS:
        return _KNOWN_KEYS[lowered], False
    if lowered.endswith("+") and lowered[:-1] in _KNOWN_KEYS:
        return _KNOWN_KEYS[lowered[:-1]], True
    raise ExpressionError(f"Unknown license key: {key!r}")


def _make_term(
    key: str, exception: Optional[str] = None, plus: bool = False
) -> LicenseTerm:
    key = key.strip().lower()
    exception = exception.strip().lower() if exception else None
    term_key = f"{key}+" if plus else key
    match = _VERSIONED_KEY.match(key)
    if match is None:
        return LicenseTerm(term_key, key, None, plus, exception)

    parts = tuple(int(part) for part in match.group("version").split("."))
    version = (parts + (0, 0, 0))[:3] if len(parts) < 3 else parts
    return LicenseTerm(
        key=term_key,
        family=match.group("family"),
        version=version,
        or_later=plus or match.group("suffix") == "-or-later",
        exception=exception,
    )


def _symbol_term(node: object) -> LicenseTerm:
    if isinstance(node, LicenseWithExceptionSymbol):
        key, plus = _resolve_key(str(node.license_symbol.key))
        exception, _ = _resolve_key(str(node.exception_symbol.key))
        return _make_term(key, exception, plus)
    if isinstance(node, LicenseSymbol):
        key, plus = _resolve_key(str(node.key))
        return _make_term(key, plus=plus)
    raise ExpressionError(f"Unexpected license expression node: {node!r}")


def _alternatives(node: object) -> list[frozenset[LicenseTerm]]:
    """Expand a parsed expression into its OR-of-ANDs alternatives."""
    if isinstance(node, _licensing.OR):
        return [alt for arg in node.args for alt in _alternatives(arg)]
    if isinstance(node, _licensing.AND):
        combined: list[frozenset[LicenseTerm]] = [frozenset()]
        for arg in node.args:
            combined = [
                left | right for left in combined for right in _alternatives(arg)
            ]
        return combined
    return [frozenset([_symbol_term(node)])]


def _parse(expression: str, simple: bool) -> object:
    try:
        parsed = _licensing.parse(
            expression, validate=not simple, strict=True, simple=simple
        )
    except (ParseError, IndexError) as e:
        # boolean.py fails on empty groups such as "()" with IndexError
        raise ExpressionError(f"Invalid license expression: {expression!r}") from e
    if parsed is None:
        raise ExpressionError(f"Empty license expression: {expression!r}")
    return parsed


@lru_cache(maxsize=1024)
def _parse_alternatives(expression: str) -> tuple[frozenset[LicenseTerm], ...]:
    try:
        parsed = _parse(expression, simple=False)
    except ExpressionError:
        # Keys such as "Apache-2.0+" are only recognised one token at a time
        parsed = _parse(expression, simple=True)
    return tuple(_alternatives(parsed))


@lru_cache(maxsize=1024)
def is_valid_expression(expression: str) -> bool:
    """Check if a string is a valid SPDX license expression on its own.

    Args:
        expression: License string to check.

    Returns:
        True if the string parses and every key is a known SPDX identifier.
    """
    if not expression or not expression.strip():
        return False
    try:
        _parse_alternatives(expression)
        return True
    except ExpressionError:
        return False


def build_whitelist_expression(licenses: Iterable[str]) -> str:
    """OR together every license that is independently valid SPDX.

    Invalid entries are left out silently; they still take part in plain
    string matching. With no valid entries the result is ``()``.

    Args:
        licenses: Allowed license strings.

    Returns:
        Expression such as ``(MIT OR ISC OR Apache-2.0)``.
    """
    valid = [license for license in licenses if is_valid_expression(license)]
    return "(" + " OR ".join(valid) + ")"


def covers(allowed: LicenseTerm, candidate: LicenseTerm) -> bool:
    """Check if an allowed license term accepts a candidate term.

    Args:
        allowed: Term taken from the whitelist expression.
        candidate: Term taken from a package's declared expression.

    Returns:
        True if the candidate license may be used under the allowed one.
    """
    if allowed.exception != candidate.exception:
        return False
    if allowed.key == candidate.key:
        return True
    if allowed.version is None or candidate.version is None:
        return False
    if allowed.family != candidate.family:
        return False
    if candidate.or_later and allowed.or_later:
        return True
    if candidate.or_later:
        return allowed.version >= candidate.version
    if allowed.or_later:
        return candidate.version >= allowed.version
    return allowed.version == candidate.version


def _alternative_covered(
    candidate: frozenset[LicenseTerm],
    whitelist: tuple[frozenset[LicenseTerm], ...],
) -> bool:
    # A whitelist alternative is usable only when all of its terms are present
    usable = [
        allowed
        for allowed in whitelist
        if all(any(covers(a, c) for c in candidate) for a in allowed)
    ]
    return all(
        any(covers(a, term) for allowed in usable for a in allowed)
        for term in candidate
    )


def satisfies(expression: str, whitelist: str) -> bool:
    """Check if a package's license expression is acceptable under a whitelist.

    Args:
        expression: The package's declared SPDX expression.
        whitelist: Compiled whitelist expression, e.g. ``(MIT OR ISC)``.

    Returns:
        True if some alternative of the expression is fully covered.
        An empty whitelist (``()``) or an unparseable input never matches.
    """
    if not whitelist or whitelist == EMPTY_WHITELIST:
        return False
    try:
        candidate_alternatives = _parse_alternatives(expression)
        whitelist_alternatives = _parse_alternatives(whitelist)
    except ExpressionError:
        return False

    return any(
        _alternative_covered(alternative, whitelist_alternatives)
        for alternative in candidate_alternatives
    )
