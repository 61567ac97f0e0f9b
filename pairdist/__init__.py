"""pairdist: all-pairs genetic distance matrices for alignments and cgMLST profiles."""

__version__ = '0.3.0'

from pairdist.core.errors import (  # noqa: E402
    ConflictingPrecomputedEntry,
    DuplicateNameError,
    FormatError,
    PairdistError,
    UnresolvedPrecomputedEntry,
)
from pairdist.core.matrix import DistanceMatrix  # noqa: E402
from pairdist.core.metrics import EXCEEDED, DistanceMetric, distance  # noqa: E402
from pairdist.core.precomputed import PrecomputedIndex  # noqa: E402
from pairdist.core.samples import SampleStore  # noqa: E402
from pairdist.core.scheduler import PairScheduler, compute_distance_matrix  # noqa: E402

__all__ = [
    '__version__',
    'SampleStore',
    'DistanceMetric',
    'distance',
    'EXCEEDED',
    'PrecomputedIndex',
    'PairScheduler',
    'compute_distance_matrix',
    'DistanceMatrix',
    'PairdistError',
    'FormatError',
    'DuplicateNameError',
    'UnresolvedPrecomputedEntry',
    'ConflictingPrecomputedEntry',
]
