"""Readers for sample and precomputed-distance files.

Supports:
- FASTA alignments (read with Biopython's SeqIO), optionally gzip/xz compressed
- cgMLST allele tables: first column sample name, then one column per locus
- Precomputed distance tables in pairdist's tabular output layout

A path of '-' reads from stdin.
"""

import gzip
import lzma
import sys
from contextlib import nullcontext

import pandas as pd
from Bio import SeqIO
from rich.console import Console

from pairdist.core.errors import FormatError

console = Console(stderr=True)


def open_text(path):
    """Open a possibly compressed text file; '-' means stdin (left open)."""
    path = str(path)
    if path == '-':
        return nullcontext(sys.stdin)
    if path.endswith('.gz'):
        return gzip.open(path, 'rt')
    if path.endswith('.xz'):
        return lzma.open(path, 'rt')
    return open(path, 'r')


def read_fasta_records(path):
    """
    Read an aligned FASTA file into (name, sequence) records.

    Parameters:
        path (str): FASTA path or '-'

    Returns:
        list of (record id, sequence string), in file order; empty when the
        file holds no records
    """
    with open_text(path) as handle:
        return [(record.id, str(record.seq)) for record in SeqIO.parse(handle, 'fasta')]


def _read_table(path, sep, skip_header):
    source = sys.stdin if str(path) == '-' else path
    try:
        return pd.read_csv(
            source, sep=sep, header=None, dtype=str, na_filter=False,
            skiprows=1 if skip_header else 0, skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(dtype=str)
    except pd.errors.ParserError as e:
        raise FormatError(f'Malformed table {path}: {e}') from None


def read_profile_records(path, sep='\t', skip_header=False):
    """
    Read a cgMLST allele table into (name, allele tokens) records.

    Parameters:
        path (str): table path or '-'
        sep (str): column separator
        skip_header (bool): drop the first line (locus names)

    Returns:
        list of (sample name, list of raw allele tokens)

    Notes:
        - Rows shorter than the first row keep only their present fields,
          so the SampleStore rejects them as a column count mismatch
        - Tokens are kept as text; encoding happens in SampleStore
    """
    df = _read_table(path, sep, skip_header)
    records = []
    for row in df.itertuples(index=False, name=None):
        fields = [v for v in row if isinstance(v, str)]
        records.append((fields[0], fields[1:]))
    return records


def read_precomputed_rows(path, sep='\t'):
    """Read (name_a, name_b, distance) rows from a previous tabular output."""
    df = _read_table(path, sep, skip_header=False)
    if df.shape[0] == 0:
        console.print(f'[yellow]Warning:[/yellow] Precomputed file {path} is empty')
        return []
    if df.shape[1] < 3:
        raise FormatError(
            f'Precomputed file {path} needs 3 columns (name, name, distance), found {df.shape[1]}'
        )
    return list(df.iloc[:, :3].itertuples(index=False, name=None))


__all__ = [
    'open_text',
    'read_fasta_records',
    'read_profile_records',
    'read_precomputed_rows',
]
