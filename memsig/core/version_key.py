"""Canonical ordering of version strings.

Version strings are split into numeric and alphabetic segments. Numeric
segments compare as integers, so ``2.4.10`` sorts after ``2.4.4``.
Alphabetic segments compare as release qualifiers::

    alpha < beta < milestone < rc < snapshot < (release) < sp < other words

and any numeric segment sorts after any qualifier at the same position.
Trailing segments that are equivalent to "nothing" (``0``, ``final``,
``ga``, ``release``) are dropped, so ``1.0``, ``1.0.0`` and ``1-final`` all
denote the same key.
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Optional, Tuple, Union

_TOKEN = re.compile(r"\d+|[a-z]+")

QUALIFIER_ALIASES = {
    "a": "alpha",
    "b": "beta",
    "m": "milestone",
    "cr": "rc",
    "pre": "rc",
    "dev": "snapshot",
    "ga": "",
    "final": "",
    "release": "",
}

QUALIFIER_RANKS = {
    "alpha": 0,
    "beta": 1,
    "milestone": 2,
    "rc": 3,
    "snapshot": 4,
    "": 5,
    "sp": 6,
}
RELEASE_RANK = QUALIFIER_RANKS[""]
UNKNOWN_RANK = max(QUALIFIER_RANKS.values()) + 1

Token = Union[int, str]


def tokenize(version_string: str) -> Tuple[Token, ...]:
    """Split a version string into normalized numeric and qualifier tokens."""
    tokens = [
        int(t) if t.isdigit() else QUALIFIER_ALIASES.get(t, t)
        for t in _TOKEN.findall(version_string.lower())
    ]
    while tokens and _compare_tokens(tokens[-1], None) == 0:
        tokens.pop()
    return tuple(tokens)


def _qualifier_rank(token: str) -> Tuple[int, str]:
    rank = QUALIFIER_RANKS.get(token)
    if rank is None:
        return (UNKNOWN_RANK, token)
    return (rank, "")


def _compare_tokens(a: Optional[Token], b: Optional[Token]) -> int:
    """Three-way comparison of two tokens; ``None`` stands for a missing token."""
    if a is None and b is None:
        return 0
    if a is None:
        return -_compare_tokens(b, a)

    if isinstance(a, int):
        if b is None:
            return 1 if a > 0 else 0
        if isinstance(b, int):
            return (a > b) - (a < b)
        return 1

    left = _qualifier_rank(a)
    if b is None:
        right = (RELEASE_RANK, "")
    elif isinstance(b, int):
        return -1
    else:
        right = _qualifier_rank(b)
    return (left > right) - (left < right)


@total_ordering
class VersionKey:
    """Total order over version strings."""

    __slots__ = ("_raw", "_tokens")

    def __init__(self, version_string: str):
        self._raw = version_string
        self._tokens = tokenize(version_string)

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    def compare(self, other: VersionKey) -> int:
        for i in range(max(len(self._tokens), len(other._tokens))):
            a = self._tokens[i] if i < len(self._tokens) else None
            b = other._tokens[i] if i < len(other._tokens) else None
            result = _compare_tokens(a, b)
            if result != 0:
                return result
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionKey):
            return NotImplemented
        return self._tokens == other._tokens

    def __lt__(self, other: VersionKey) -> bool:
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"VersionKey({self._raw!r})"
