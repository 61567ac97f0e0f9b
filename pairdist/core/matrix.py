"""Condensed, symmetric distance matrix.

Only the strict lower triangle is stored, row by row: pair (i, j) with
j < i lives at ``i * (i - 1) // 2 + j``. Row i of the lower triangle is
therefore one contiguous slice, which is also the order of the
lower-triangle output.
"""

import numpy as np

from pairdist.core.metrics import EXCEEDED


def pair_count(n):
    """Number of unordered pairs among n samples."""
    return n * (n - 1) // 2


def flat_index(i, j):
    """Position of the unordered pair (i, j) in the condensed array."""
    if i == j:
        raise IndexError(f"Diagonal ({i}, {j}) is not stored")
    if i < j:
        i, j = j, i
    return i * (i - 1) // 2 + j


class DistanceMatrix:
    """Read-only view of the completed pairwise distances.

    ``get(i, j) == get(j, i)`` holds by construction since both resolve to
    the same condensed cell. The diagonal is implicitly zero.
    """

    def __init__(self, names, condensed, maxdist=None, precomputed_hits=0, precomputed_unresolved=0):
        self.names = list(names)
        n = len(self.names)
        if condensed.shape != (pair_count(n),):
            raise ValueError(f"Expected {pair_count(n)} condensed entries for {n} samples, got {condensed.shape}")
        self.condensed = condensed
        self.condensed.setflags(write=False)
        self.maxdist = maxdist
        self.precomputed_hits = precomputed_hits
        self.precomputed_unresolved = precomputed_unresolved

    @classmethod
    def empty(cls, names, maxdist=None, precomputed_unresolved=0):
        return cls(names, np.zeros(pair_count(len(names)), dtype=np.int32), maxdist=maxdist,
                   precomputed_unresolved=precomputed_unresolved)

    def count(self):
        return len(self.names)

    def __len__(self):
        return len(self.names)

    def sample_name(self, i):
        return self.names[i]

    def get(self, i, j):
        """Distance between samples i and j; EXCEEDED if maxdist pruning kicked in."""
        if i == j:
            return 0
        return int(self.condensed[flat_index(i, j)])

    def is_exceeded(self, i, j):
        return self.get(i, j) == EXCEEDED

    def lower_row(self, i):
        """Distances d(i, 0) .. d(i, i-1) as a view."""
        start = pair_count(i)
        return self.condensed[start:start + i]

    def row(self, i):
        """All n distances of sample i, including the zero diagonal."""
        n = len(self.names)
        out = np.zeros(n, dtype=self.condensed.dtype)
        out[:i] = self.lower_row(i)
        js = np.arange(i + 1, n)
        out[i + 1:] = self.condensed[js * (js - 1) // 2 + i]
        return out

    def format_distance(self, value):
        """Render one distance; the exceeded marker becomes '>maxdist'."""
        if value == EXCEEDED:
            return f">{self.maxdist}"
        return str(value)

    def __eq__(self, other):
        if not isinstance(other, DistanceMatrix):
            return NotImplemented
        return (self.names == other.names and self.maxdist == other.maxdist
                and np.array_equal(self.condensed, other.condensed))

    def __repr__(self):
        return f"DistanceMatrix(n={len(self.names)}, maxdist={self.maxdist})"


__all__ = ['DistanceMatrix', 'pair_count', 'flat_index']
