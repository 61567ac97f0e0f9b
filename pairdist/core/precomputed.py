"""Lookup of already-known distances keyed by unordered sample-name pairs.

Rows come from a previous pairdist run (tabular output), so the distance
field is either an integer or the exceeded marker ``>N``.
"""

import warnings
from typing import NamedTuple, Optional, Union

from pairdist.core.errors import ConflictingPrecomputedEntry, FormatError
from pairdist.core.metrics import EXCEEDED

_MAX_STORED = 2 ** 31 - 1


class ExceededDistance(NamedTuple):
    """A distance only known to be greater than ``bound``."""
    bound: int

    def __str__(self):
        return f">{self.bound}"


Precomputed = Union[int, ExceededDistance]


def pair_key(name_a, name_b):
    """Canonical key for an unordered pair of sample names."""
    return (name_a, name_b) if name_a <= name_b else (name_b, name_a)


def parse_distance(token):
    """Parse a distance field: a non-negative integer or ``>N``."""
    if isinstance(token, ExceededDistance):
        return token
    if isinstance(token, int):
        value = token
    else:
        s = str(token).strip()
        try:
            if s.startswith('>'):
                return ExceededDistance(int(s[1:].strip()))
            value = int(s)
        except ValueError:
            raise FormatError(f"Invalid precomputed distance: {token!r}") from None
    if value < 0 or value > _MAX_STORED:
        raise FormatError(f"Precomputed distance out of range: {token!r}")
    return value


def effective_distance(value: Precomputed, limit: Optional[int]) -> Optional[int]:
    """Value to store for a precomputed entry under ``limit``, or None to recompute.

    Exact integers are used verbatim. ``>N`` can only stand for the exceeded
    marker when the current limit is at most N.
    """
    if isinstance(value, ExceededDistance):
        if limit is not None and limit <= value.bound:
            return EXCEEDED
        return None
    return value


class PrecomputedIndex:
    """Immutable mapping from pair key to a known distance.

    Attributes:
        conflicts: number of rows that overrode an earlier, different value
        self_pairs: rows naming the same sample twice (ignored)
    """

    def __init__(self, entries=None, conflicts=0, self_pairs=0):
        self._entries = dict(entries or {})
        self.conflicts = conflicts
        self.self_pairs = self_pairs

    @classmethod
    def build(cls, rows):
        """Build the index from ``(name_a, name_b, distance)`` rows.

        Duplicate keys keep the last value; a duplicate with a different
        value counts as a conflict and is reported once via
        ConflictingPrecomputedEntry.
        """
        entries = {}
        conflicts = 0
        self_pairs = 0
        for name_a, name_b, token in rows:
            if name_a == name_b:
                self_pairs += 1
                continue
            key = pair_key(name_a, name_b)
            value = parse_distance(token)
            previous = entries.get(key)
            if previous is not None and previous != value:
                conflicts += 1
            entries[key] = value

        if conflicts:
            warnings.warn(
                ConflictingPrecomputedEntry(
                    f"{conflicts} precomputed pair(s) listed with different distances; last value kept"
                ),
                stacklevel=2,
            )
        return cls(entries, conflicts=conflicts, self_pairs=self_pairs)

    def lookup(self, name_a, name_b=None):
        """Known distance for a pair (key tuple or two names), else None."""
        if name_b is None:
            name_a, name_b = name_a
        return self._entries.get(pair_key(name_a, name_b))

    def items(self):
        return self._entries.items()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return pair_key(*key) in self._entries

    def __repr__(self):
        return f"PrecomputedIndex({len(self._entries)} pairs, conflicts={self.conflicts})"


__all__ = [
    'ExceededDistance',
    'PrecomputedIndex',
    'pair_key',
    'parse_distance',
    'effective_distance',
]
