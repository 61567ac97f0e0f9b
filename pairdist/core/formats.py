"""Input formats, output formats and output modes understood by pairdist."""

# Input formats
CGMLST = 'cgmlst'
CGMLST_HASH = 'cgmlst-hash'
FASTA = 'fasta'
FASTA_ALL = 'fasta-all'

# cgmlst-hash symbols are SHA1-sized, stored as 32-bit words
HASH_BYTES = 20
HASH_WORDS = HASH_BYTES // 4

INPUT_FORMATS = (CGMLST, CGMLST_HASH, FASTA, FASTA_ALL)
ALIGNMENT_FORMATS = (FASTA, FASTA_ALL)
TABLE_FORMATS = (CGMLST, CGMLST_HASH)

# Output formats
TABULAR = 'tabular'
PHYLIP = 'phylip'

OUTPUT_FORMATS = (TABULAR, PHYLIP)

# Output modes
LOWER_TRIANGLE = 'lower-triangle'
FULL = 'full'

OUTPUT_MODES = (LOWER_TRIANGLE, FULL)


def check_input_format(input_format):
    if input_format not in INPUT_FORMATS:
        raise ValueError(f"Unknown input format {input_format!r}; expected one of {INPUT_FORMATS}")
    return input_format


__all__ = [
    'CGMLST', 'CGMLST_HASH', 'FASTA', 'FASTA_ALL', 'HASH_BYTES', 'HASH_WORDS',
    'INPUT_FORMATS', 'ALIGNMENT_FORMATS', 'TABLE_FORMATS',
    'TABULAR', 'PHYLIP', 'OUTPUT_FORMATS',
    'LOWER_TRIANGLE', 'FULL', 'OUTPUT_MODES',
    'check_input_format',
]
