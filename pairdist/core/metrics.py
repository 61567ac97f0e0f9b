"""
Pairwise mismatch counting with numba.

One kernel per symbol-equality rule; the rule is picked once per run from
the input format, so the inner loops never branch on the format:

1. ACGT      (fasta)        OTHER (0) on either side never counts
2. LITERAL   (fasta-all)    every literal inequality counts
3. ALLELE    (cgmlst, cgmlst-hash)  missing (all-zero symbol) never matches,
                             not even another missing symbol

All kernels take ``limit`` (-1 for none) and return EXCEEDED as soon as the
running count goes above it.
"""
import numpy as np
import numba as nb

from pairdist.core.errors import FormatError
from pairdist.core.formats import CGMLST, CGMLST_HASH, FASTA, FASTA_ALL, HASH_WORDS, check_input_format

# Sentinel for a count aborted above the limit; never a real distance
EXCEEDED = -1
NO_LIMIT = -1

KERNEL_ACGT = 0
KERNEL_LITERAL = 1
KERNEL_ALLELE = 2

_KERNELS = {
    FASTA: (KERNEL_ACGT, 1),
    FASTA_ALL: (KERNEL_LITERAL, 1),
    CGMLST: (KERNEL_ALLELE, 1),
    CGMLST_HASH: (KERNEL_ALLELE, HASH_WORDS),
}


@nb.njit(cache=True)
def count_acgt(a, b, limit):
    count = 0
    for k in range(a.shape[0]):
        x = a[k]
        y = b[k]
        if x != y and x != 0 and y != 0:
            count += 1
            if limit >= 0 and count > limit:
                return EXCEEDED
    return count


@nb.njit(cache=True)
def count_literal(a, b, limit):
    count = 0
    for k in range(a.shape[0]):
        if a[k] != b[k]:
            count += 1
            if limit >= 0 and count > limit:
                return EXCEEDED
    return count


@nb.njit(cache=True)
def count_alleles(a, b, width, limit):
    count = 0
    n_loci = a.shape[0] // width
    for k in range(n_loci):
        base = k * width
        a_missing = True
        b_missing = True
        differ = False
        for w in range(width):
            x = a[base + w]
            y = b[base + w]
            if x != 0:
                a_missing = False
            if y != 0:
                b_missing = False
            if x != y:
                differ = True
        if differ or a_missing or b_missing:
            count += 1
            if limit >= 0 and count > limit:
                return EXCEEDED
    return count


@nb.njit(cache=True)
def pair_distance(a, b, kernel, width, limit):
    """Distance between two encoded rows using the given kernel id."""
    if kernel == KERNEL_ACGT:
        return count_acgt(a, b, limit)
    if kernel == KERNEL_LITERAL:
        return count_literal(a, b, limit)
    return count_alleles(a, b, width, limit)


def check_limit(limit):
    """Translate an optional maxdist into the kernel convention (-1 = none)."""
    if limit is None:
        return NO_LIMIT
    limit = int(limit)
    if limit < 0:
        raise ValueError(f"maxdist must be >= 0, got {limit}")
    return limit


class DistanceMetric:
    """Symbol-equality rule for one input format.

    Calling the metric on two encoded rows returns the mismatch count, or
    EXCEEDED when ``limit`` is given and the count goes above it.
    """

    def __init__(self, input_format):
        self.input_format = check_input_format(input_format)
        self.kernel, self.width = _KERNELS[input_format]

    @classmethod
    def for_store(cls, store):
        return cls(store.input_format)

    def distance(self, tokens_a, tokens_b, limit=None):
        if tokens_a.shape != tokens_b.shape:
            raise FormatError(
                f"Cannot compare rows of different length ({tokens_a.shape[0]} vs {tokens_b.shape[0]})"
            )
        return int(pair_distance(tokens_a, tokens_b, self.kernel, self.width, check_limit(limit)))

    __call__ = distance

    def __repr__(self):
        return f"DistanceMetric({self.input_format!r})"


def distance(tokens_a, tokens_b, input_format, limit=None):
    """Shortcut for ``DistanceMetric(input_format).distance(...)``."""
    return DistanceMetric(input_format).distance(np.asarray(tokens_a), np.asarray(tokens_b), limit)


__all__ = [
    'EXCEEDED',
    'NO_LIMIT',
    'DistanceMetric',
    'distance',
    'pair_distance',
    'check_limit',
]
