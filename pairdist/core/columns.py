"""Removal of positions/loci that cannot contribute to any distance.

A column shared by every sample never adds to a mismatch count, so the
kernels can skip it. This only changes speed, never the distances:

- fasta: a column is removable when its concrete bases (ignoring OTHER)
  are all the same
- fasta-all: a column is removable when every character is identical
- cgmlst / cgmlst-hash: a column is removable when every sample carries
  the same non-missing allele; missing never matches, so columns with a
  missing call always stay
"""

import numpy as np
from rich.console import Console

from pairdist.core.formats import FASTA, FASTA_ALL

console = Console(stderr=True)


def find_identical_columns(store):
    """Boolean mask over symbols, True where the column can be dropped."""
    n = store.count()
    if n < 2:
        return np.zeros(store.n_symbols, dtype=bool)

    if store.input_format == FASTA:
        tokens = store.tokens
        col_max = tokens.max(axis=0)
        # 255 never occurs as an ACGT code, so it stands in for OTHER here
        col_min = np.where(tokens == 0, np.uint8(255), tokens).min(axis=0)
        return (col_max == 0) | (col_max == col_min)

    symbols = store.tokens.reshape(n, store.n_symbols, store.width)
    same = (symbols == symbols[0]).all(axis=(0, 2))
    if store.input_format == FASTA_ALL:
        return same
    missing = (symbols[0] == 0).all(axis=1)
    return same & ~missing


def drop_identical_columns(store, verbose=False):
    """Return (store_without_identical_columns, n_removed)."""
    removable = find_identical_columns(store)
    n_removed = int(removable.sum())
    if n_removed == 0:
        if verbose:
            console.print('[yellow]No identical columns found[/yellow]')
        return store, 0

    n_total = store.n_symbols
    if verbose:
        console.print('[bold]Dropping identical columns[/bold]')
        console.print(f'  Original columns: {n_total:,}')
        console.print(f'  Removed: {n_removed:,} ({100 * n_removed / n_total:.1f}%)')
    return store.select_symbols(~removable), n_removed


__all__ = ['find_identical_columns', 'drop_identical_columns']
