"""
Parallel all-pairs distance computation with shared memory.

The n*(n-1)/2 unordered pairs are flattened into the condensed
lower-triangle order used by DistanceMatrix and split into contiguous,
balanced ranges, one per worker. Each worker writes only the cells of its
own range into a SharedArray, so the result needs no locking.

Precomputed distances are seeded into the result before the workers start;
workers skip every cell that is already set.
"""
import multiprocessing as mp
import warnings
from tempfile import NamedTemporaryFile

import numpy as np
import numba as nb
import SharedArray as sa
from rich.console import Console

from pairdist.core.errors import UnresolvedPrecomputedEntry
from pairdist.core.matrix import DistanceMatrix, flat_index, pair_count
from pairdist.core.metrics import DistanceMetric, check_limit, pair_distance
from pairdist.core.precomputed import effective_distance

console = Console(stderr=True)

# Cell not yet computed; distinct from EXCEEDED and from real distances
UNSET = -2


@nb.njit(cache=True)
def unflatten(k):
    """Inverse of flat_index: the (i, j) pair, j < i, stored at position k."""
    i = np.int64((1.0 + np.sqrt(1.0 + 8.0 * k)) / 2.0)
    # Float rounding can be off by one for very large k
    while i * (i - 1) // 2 > k:
        i -= 1
    while (i + 1) * i // 2 <= k:
        i += 1
    return i, k - i * (i - 1) // 2


@nb.njit(cache=True)
def fill_range(tokens, out, s, e, kernel, width, limit):
    """Compute every unset cell in the condensed range [s, e)."""
    if s >= e:
        return
    i, j = unflatten(s)
    for k in range(s, e):
        if out[k] == UNSET:
            out[k] = pair_distance(tokens[i], tokens[j], kernel, width, limit)
        j += 1
        if j == i:
            i += 1
            j = 0


def make_chunks(total, n_workers):
    """
    Split [0, total) into contiguous ranges whose sizes differ by at most one.

    Returns at most ``n_workers`` non-empty (s, e) tuples.
    """
    n_workers = max(1, min(n_workers, total))
    base = total // n_workers
    extras = total % n_workers
    ranges = []
    s = 0
    for i in range(n_workers):
        e = s + base + (1 if i < extras else 0)
        if e > s:
            ranges.append((s, e))
        s = e
    return ranges


def _worker_task(tokens_buf, out_buf, s, e, kernel, width, limit):
    """Attach the shared arrays and fill one range of the result."""
    tokens = sa.attach(tokens_buf)
    out = sa.attach(out_buf)
    try:
        fill_range(tokens, out, s, e, kernel, width, limit)
    finally:
        del tokens, out


def seed_precomputed(out, store, precomputed, limit):
    """Write usable precomputed distances into ``out``.

    Returns:
        tuple: (hits, unresolved, recompute)
            - hits: cells taken from the index
            - unresolved: rows naming samples that are not loaded (dropped)
            - recompute: '>N' rows too weak for the current limit
    """
    hits = unresolved = recompute = 0
    if precomputed is None:
        return hits, unresolved, recompute
    for (name_a, name_b), value in precomputed.items():
        i = store.index_of(name_a)
        j = store.index_of(name_b)
        if i is None or j is None:
            unresolved += 1
            continue
        stored = effective_distance(value, limit)
        if stored is None:
            recompute += 1
            continue
        out[flat_index(i, j)] = stored
        hits += 1
    return hits, unresolved, recompute


class PairScheduler:
    """Computes a DistanceMatrix over all sample pairs with a fixed worker pool.

    Parameters:
        worker_count: number of worker processes; 1 runs in-process. The
            result does not depend on this value.
        verbose: print per-run scheduling details
    """

    def __init__(self, worker_count=1, verbose=False):
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")
        self.worker_count = worker_count
        self.verbose = verbose

    def run(self, store, metric=None, precomputed=None, limit=None):
        """
        Compute all pairwise distances of ``store``.

        Parameters:
            store: SampleStore
            metric: DistanceMetric (default: the one matching the store's format)
            precomputed: optional PrecomputedIndex consulted before computing
            limit: optional maxdist; larger distances become EXCEEDED

        Returns:
            DistanceMatrix (empty when fewer than two samples are loaded)
        """
        n = store.count()
        if n < 2:
            # No pair can resolve, so every precomputed row is unresolved
            unresolved = len(precomputed) if precomputed is not None else 0
            self._warn_unresolved(unresolved)
            return DistanceMatrix.empty(store.names, maxdist=limit, precomputed_unresolved=unresolved)

        metric = metric or DistanceMetric.for_store(store)
        kernel_limit = check_limit(limit)
        total = pair_count(n)
        chunks = make_chunks(total, self.worker_count)

        if self.verbose:
            console.print(f'  {total:,} pairs over {len(chunks)} worker(s)')

        if len(chunks) == 1 or store.tokens.size == 0:
            out = np.full(total, UNSET, dtype=np.int32)
            hits, unresolved, recompute = seed_precomputed(out, store, precomputed, limit)
            fill_range(store.tokens, out, 0, total, metric.kernel, metric.width, kernel_limit)
            result = out
        else:
            result, hits, unresolved, recompute = self._run_pool(
                store, metric, precomputed, limit, kernel_limit, chunks
            )

        self._warn_unresolved(unresolved)
        if self.verbose and recompute:
            console.print(f'  {recompute} precomputed ">N" entries are below maxdist; recomputed')

        return DistanceMatrix(
            store.names, result, maxdist=limit,
            precomputed_hits=hits, precomputed_unresolved=unresolved,
        )

    @staticmethod
    def _warn_unresolved(unresolved):
        if unresolved:
            warnings.warn(
                UnresolvedPrecomputedEntry(
                    f"{unresolved} precomputed pair(s) reference unknown samples and were skipped"
                ),
                stacklevel=3,
            )

    def _run_pool(self, store, metric, precomputed, limit, kernel_limit, chunks):
        with NamedTemporaryFile(prefix='pairdist_') as file:
            prefix = 'file://{0}'.format(file.name)

            tokens_buf = '{0}.tokens.sa'.format(prefix)
            tokens = sa.create(tokens_buf, shape=store.tokens.shape, dtype=store.tokens.dtype)
            tokens[:] = store.tokens

            out_buf = '{0}.dist.sa'.format(prefix)
            out = sa.create(out_buf, shape=(pair_count(store.count()),), dtype=np.int32)
            try:
                out[:] = UNSET
                hits, unresolved, recompute = seed_precomputed(out, store, precomputed, limit)

                # Compile for the shared array types once; forked workers inherit it
                fill_range(tokens, out, 0, 0, metric.kernel, metric.width, kernel_limit)

                tasks = [
                    (tokens_buf, out_buf, s, e, metric.kernel, metric.width, kernel_limit)
                    for s, e in chunks
                ]
                pool = mp.get_context('fork').Pool(len(chunks))
                try:
                    pool.starmap(_worker_task, tasks)
                finally:
                    pool.close()
                    pool.join()

                # Copy result before cleanup
                result = np.array(out)
            finally:
                sa.delete(tokens_buf)
                sa.delete(out_buf)
                del tokens, out

        return result, hits, unresolved, recompute


def compute_distance_matrix(store, precomputed=None, maxdist=None, nproc=1, verbose=False):
    """Convenience wrapper: schedule all pairs of ``store`` with its own metric."""
    scheduler = PairScheduler(worker_count=nproc, verbose=verbose)
    return scheduler.run(store, DistanceMetric.for_store(store), precomputed, maxdist)


__all__ = [
    'PairScheduler',
    'compute_distance_matrix',
    'make_chunks',
    'fill_range',
    'unflatten',
    'seed_precomputed',
    'UNSET',
]
