"""Sample loading and per-format symbol encoding.

Every sample is encoded into one row of a shared numpy matrix so that the
distance kernels can compare rows positionally:

- fasta: uint8 codes, A=1 C=2 G=3 T=4, everything else 0 (OTHER)
- fasta-all: the raw uint8 character
- cgmlst: int64 allele numbers, 0 is the missing sentinel
- cgmlst-hash: 20-byte hashes stored as 5 uint32 words per locus,
  all-zero words are the missing sentinel
"""

import re

import numpy as np
import pandas as pd

from pairdist.core.errors import DuplicateNameError, FormatError
from pairdist.core.formats import (
    CGMLST, CGMLST_HASH, FASTA, FASTA_ALL, HASH_BYTES, HASH_WORDS, check_input_format,
)

# Lookup table from byte value to nucleotide class
_ACGT_CODES = np.zeros(256, dtype=np.uint8)
for _code, _base in enumerate('ACGT', start=1):
    _ACGT_CODES[ord(_base)] = _code
    _ACGT_CODES[ord(_base.lower())] = _code

_HEX_RE = re.compile(r'^[0-9a-fA-F]+$')
_MISSING_HASH = bytes(HASH_BYTES)
_MAX_ALLELE = 2 ** 63 - 1


def parse_allele(token):
    """Convert a cgMLST allele call into an integer, 0 meaning missing.

    chewBBACA marks inferred alleles with an ``INF-`` prefix which is
    stripped. Anything that is not a positive integer afterwards (LNF,
    PLOT5, ASM, '-', empty) is missing.
    """
    s = str(token).strip()
    s = s.removeprefix('INF-')
    if not s.isdigit():
        return 0
    value = int(s)
    if value > _MAX_ALLELE:
        return 0
    return value


def parse_allele_hash(token):
    """Convert a hex content hash into a fixed-width 20-byte value.

    Shorter hashes (e.g. MD5) are zero padded. Invalid or empty tokens
    become the all-zero missing hash.
    """
    s = str(token).strip()
    if not s or len(s) % 2 or len(s) > 2 * HASH_BYTES or not _HEX_RE.match(s):
        return _MISSING_HASH
    return bytes.fromhex(s).ljust(HASH_BYTES, b'\0')


def _sequence_bytes(seq):
    if isinstance(seq, (bytes, bytearray)):
        return bytes(seq)
    if not isinstance(seq, str):
        seq = ''.join(seq)
    return seq.encode('ascii', 'replace')


def _encode_alignment(records, input_format):
    width = None
    first_name = None
    rows = []
    for name, seq in records:
        raw = _sequence_bytes(seq)
        if width is None:
            width, first_name = len(raw), name
        elif len(raw) != width:
            raise FormatError(
                f"Sequence length mismatch: {name!r} has {len(raw)} positions, "
                f"{first_name!r} has {width}. Input must be aligned."
            )
        rows.append(np.frombuffer(raw, dtype=np.uint8))

    width = width or 0
    mat = np.empty((len(rows), width), dtype=np.uint8)
    for i, row in enumerate(rows):
        mat[i] = _ACGT_CODES[row] if input_format == FASTA else row
    return mat


def _encode_table(records, input_format):
    n_loci = None
    first_name = None
    for name, fields in records:
        if n_loci is None:
            n_loci, first_name = len(fields), name
        elif len(fields) != n_loci:
            raise FormatError(
                f"Column count mismatch: {name!r} has {len(fields)} loci, "
                f"{first_name!r} has {n_loci}."
            )
    n_loci = n_loci or 0
    n = len(records)

    flat = pd.Series([str(f) for _, fields in records for f in fields], dtype=object)
    # Map each distinct token once, then broadcast (alleles repeat heavily)
    uniques = pd.unique(flat)
    if input_format == CGMLST:
        mapping = {tok: parse_allele(tok) for tok in uniques}
        values = flat.map(mapping).to_numpy(dtype=np.int64)
        return values.reshape(n, n_loci)

    if n == 0 or n_loci == 0:
        return np.zeros((n, n_loci * HASH_WORDS), dtype=np.uint32)
    mapping = {tok: parse_allele_hash(tok) for tok in uniques}
    packed = b''.join(flat.map(mapping).tolist())
    words = np.frombuffer(packed, dtype='<u4').astype(np.uint32)
    return words.reshape(n, n_loci * HASH_WORDS)


class SampleStore:
    """Decoded samples in a fixed index order (order of first appearance).

    ``tokens`` holds one encoded row per sample. Rows are read-only; every
    symbol occupies ``width`` consecutive cells (5 for hashes, 1 otherwise).
    """

    def __init__(self, names, tokens, input_format):
        self.names = list(names)
        self.input_format = check_input_format(input_format)
        self.width = HASH_WORDS if input_format == CGMLST_HASH else 1
        self.tokens = tokens
        self.tokens.setflags(write=False)
        self._index = {name: i for i, name in enumerate(self.names)}

    @classmethod
    def load(cls, records, input_format):
        """Build a store from ``(name, raw_fields)`` records.

        Parameters:
            records: iterable of (name, fields); fields is a sequence string
                for fasta formats or a list of allele tokens for table formats
            input_format: one of pairdist.core.formats.INPUT_FORMATS

        Raises:
            DuplicateNameError: two records share a name
            FormatError: sequences/rows differ in length
        """
        check_input_format(input_format)
        records = list(records)
        seen = set()
        for name, _ in records:
            if name in seen:
                raise DuplicateNameError(name)
            seen.add(name)

        if input_format in (FASTA, FASTA_ALL):
            tokens = _encode_alignment(records, input_format)
        else:
            tokens = _encode_table(records, input_format)
        return cls([name for name, _ in records], tokens, input_format)

    def count(self):
        return len(self.names)

    def __len__(self):
        return len(self.names)

    def name_of(self, index):
        return self.names[index]

    def index_of(self, name):
        """Index of a sample name, or None when the name is not loaded."""
        return self._index.get(name)

    def tokens_of(self, index):
        """Read-only view of one sample's encoded symbols."""
        return self.tokens[index]

    @property
    def n_symbols(self):
        """Number of comparable positions/loci per sample."""
        return self.tokens.shape[1] // self.width

    def select_symbols(self, keep):
        """Return a new store keeping only the symbols where ``keep`` is True."""
        keep = np.asarray(keep, dtype=bool)
        if self.width > 1:
            keep = np.repeat(keep, self.width)
        return SampleStore(self.names, np.ascontiguousarray(self.tokens[:, keep]), self.input_format)


__all__ = ['SampleStore', 'parse_allele', 'parse_allele_hash']
