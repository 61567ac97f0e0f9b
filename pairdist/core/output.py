"""Writers for distance matrices: tabular long format and Phylip."""

import sys
from contextlib import nullcontext

from pairdist.core.formats import FULL, LOWER_TRIANGLE, OUTPUT_FORMATS, OUTPUT_MODES, PHYLIP, TABULAR


def open_output(path):
    """Open an output file for writing; '-' means stdout (left open)."""
    if str(path) == '-':
        return nullcontext(sys.stdout)
    return open(path, 'w', newline='\n')


def _render(matrix, values):
    return [matrix.format_distance(v) for v in values.tolist()]


def write_tabular(matrix, handle, sep='\t', output_mode=LOWER_TRIANGLE):
    """Write one ``name_i SEP name_j SEP distance`` line per pair.

    lower-triangle emits each unordered pair once (j < i); full emits every
    ordered pair including the zero diagonal.
    """
    names = matrix.names
    for i, name in enumerate(names):
        if output_mode == FULL:
            values = matrix.row(i)
            others = names
        else:
            values = matrix.lower_row(i)
            others = names[:i]
        for other, dist in zip(others, _render(matrix, values)):
            handle.write(f'{name}{sep}{other}{sep}{dist}\n')


def write_phylip(matrix, handle, sep='\t', output_mode=LOWER_TRIANGLE):
    """Write a Phylip distance matrix.

    First line is the sample count, then one row per sample. Lower-triangle
    rows hold d(i, 0)..d(i, i-1); full rows hold all n distances.
    """
    handle.write(f'{matrix.count()}\n')
    for i, name in enumerate(matrix.names):
        values = matrix.row(i) if output_mode == FULL else matrix.lower_row(i)
        handle.write(sep.join([name] + _render(matrix, values)) + '\n')


def write_distances(matrix, output, sep='\t', output_format=TABULAR, output_mode=LOWER_TRIANGLE):
    """Render ``matrix`` to a path (or '-') in the requested format and mode."""
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f'Unknown output format {output_format!r}')
    if output_mode not in OUTPUT_MODES:
        raise ValueError(f'Unknown output mode {output_mode!r}')

    writer = write_phylip if output_format == PHYLIP else write_tabular
    with open_output(output) as handle:
        writer(matrix, handle, sep=sep, output_mode=output_mode)


__all__ = ['write_distances', 'write_tabular', 'write_phylip', 'open_output']
