"""Version parsing, comparison and threshold routing.

Resolves a client version like ``1.580.1-SNAPSHOT`` to the mirror bucket
serving its release line. Pure functions only; the rule table is loaded once
by ``services.rules_service`` and passed in explicitly.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

VersionVector = tuple[int, ...]

SNAPSHOT = "SNAPSHOT"

# Appended to a threshold so the rule covers every point release of its line
RELEASE_LINE_SENTINEL = ".999"

_separator_re = re.compile(r"[.-]")
_leading_int_re = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
_strict_token_re = re.compile(r"[0-9]+")

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_MAX_DIGITS = 19


class InvalidVersionError(ValueError):
    """Raised by strict parsing when a version component is not numeric."""

    def __init__(self, version: str, token: str) -> None:
        self.version = version
        self.token = token
        super().__init__(
            f"Invalid version {version!r}: component {token!r} is not numeric"
        )


@dataclass(frozen=True)
class ThresholdRule:
    """Versions up through the ``threshold`` release line go to ``bucket``."""

    threshold: str
    bucket: str


RuleTable = tuple[ThresholdRule, ...]


def _parse_token(token: str) -> int:
    """Leading-numeric-prefix integer; anything without digits is 0."""
    if token == SNAPSHOT:
        return -1
    match = _leading_int_re.match(token)
    if not match:
        return 0

    # Saturates at the 64-bit integer range
    number = match.group(1)
    if len(number.lstrip("+-").lstrip("0")) > _MAX_DIGITS:
        return _INT64_MIN if number.startswith("-") else _INT64_MAX
    return max(_INT64_MIN, min(_INT64_MAX, int(number)))


def parse_version(version: str, strict: bool = False) -> VersionVector:
    """Split a version on ``.``/``-`` into a vector of integers.

    ``SNAPSHOT`` becomes -1 so snapshots sort below the release they precede.
    In lenient mode (the default) a non-numeric component reads as 0; with
    ``strict=True`` it raises :class:`InvalidVersionError` instead.

    Examples:
        >>> parse_version("1.580.1-SNAPSHOT")
        (1, 580, 1, -1)
        >>> parse_version("1.x.3")
        (1, 0, 3)
    """
    if not version:
        return ()

    tokens = _separator_re.split(version)
    if strict:
        for token in tokens:
            if token != SNAPSHOT and not _strict_token_re.fullmatch(token):
                raise InvalidVersionError(version, token)
    return tuple(_parse_token(token) for token in tokens)


def compare_vectors(lhs: Sequence[int], rhs: Sequence[int]) -> int:
    """Compare two version vectors, padding the shorter one with zeros."""
    for i in range(max(len(lhs), len(rhs))):
        left = lhs[i] if i < len(lhs) else 0
        right = rhs[i] if i < len(rhs) else 0
        if left < right:
            return -1
        if left > right:
            return 1
    return 0


def compare_versions(lhs: str, rhs: str) -> int:
    """Return -1, 0 or 1 as ``lhs`` sorts below, equal to or above ``rhs``.

    ``"1.2-SNAPSHOT" < "1.2" == "1.2.0"``.
    """
    return compare_vectors(parse_version(lhs), parse_version(rhs))


def route(
    version: str,
    rules: Sequence[ThresholdRule],
    fallback: str,
    strict: bool = False,
) -> str:
    """Return the bucket of the first rule whose release line covers ``version``.

    A rule with threshold ``1.600`` matches every version up to and including
    ``1.600.999``. Rules are scanned in order and the first match wins; when
    nothing matches, ``fallback`` is returned.
    """
    vector = parse_version(version, strict=strict)
    for rule in rules:
        ceiling = parse_version(rule.threshold + RELEASE_LINE_SENTINEL)
        if compare_vectors(vector, ceiling) <= 0:
            return rule.bucket
    return fallback
