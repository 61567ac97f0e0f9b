"""Error and warning taxonomy for distance computation.

Fatal problems are raised as exceptions before any pair is compared.
Recoverable anomalies in precomputed distances are counted and issued as
warnings so the caller can report them.
"""


class PairdistError(Exception):
    """Base class for fatal pairdist errors."""


class FormatError(PairdistError, ValueError):
    """Samples have inconsistent comparable lengths/columns, or input is unreadable."""


class DuplicateNameError(PairdistError, ValueError):
    """Two input records share the same sample name."""

    def __init__(self, name):
        super().__init__(f"Duplicate sample name: {name!r}")
        self.name = name


class UnresolvedPrecomputedEntry(UserWarning):
    """Precomputed rows referencing sample names that are not loaded."""


class ConflictingPrecomputedEntry(UserWarning):
    """The same sample pair appears more than once with different distances."""


__all__ = [
    'PairdistError',
    'FormatError',
    'DuplicateNameError',
    'UnresolvedPrecomputedEntry',
    'ConflictingPrecomputedEntry',
]
