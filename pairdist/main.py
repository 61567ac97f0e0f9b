"""pairdist pipeline - main orchestrator

Four-step distance pipeline:
1. Load & encode samples
2. Load precomputed distances (optional)
3. Compute pairwise distances
4. Write output
"""
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any

from rich.console import Console

from pairdist import __version__
from pairdist.config_utils import print_config_summary, resolve_worker_count, validate_config
from pairdist.core.columns import drop_identical_columns
from pairdist.core.formats import ALIGNMENT_FORMATS, FASTA, LOWER_TRIANGLE, TABULAR
from pairdist.core.input import read_fasta_records, read_precomputed_rows, read_profile_records
from pairdist.core.output import write_distances
from pairdist.core.precomputed import PrecomputedIndex
from pairdist.core.samples import SampleStore
from pairdist.core.scheduler import PairScheduler

console = Console(stderr=True)


@dataclass
class DistanceConfig:
    """Configuration for the distance pipeline."""

    # Required
    input: str
    output: str

    # Formats
    input_format: str = FASTA
    output_format: str = TABULAR
    output_mode: str = LOWER_TRIANGLE

    # Precomputed distances (file in tabular output layout)
    precomputed: Optional[str] = None

    # Separators
    input_sep: str = '\t'
    output_sep: str = '\t'

    # Computation
    maxdist: Optional[int] = None  # None computes exact distances
    skip_header: bool = False
    nproc: Optional[int] = None  # None uses all available CPUs
    drop_identical_columns: bool = False

    # General
    verbose: bool = False


class DistancePipeline:
    """Runs load -> precomputed -> distances -> write for one configuration."""

    def __init__(self, config: DistanceConfig):
        validate_config(config)
        self.config = config
        self.worker_count = resolve_worker_count(config.nproc)
        self.results: Dict[str, Any] = {
            'step_1_input': {},
            'step_2_precomputed': {},
            'step_3_distances': {},
            'step_4_output': {},
        }

    def _debug(self, message):
        if self.config.verbose:
            console.print(message)

    def run(self):
        """Execute the full pipeline."""
        self._debug(f"[bold cyan]pairdist {__version__}[/bold cyan]")
        if self.config.verbose:
            print_config_summary(self.config, self.worker_count)

        self._step_1_load_samples()
        self._step_2_precomputed()
        self._step_3_distances()
        self._step_4_write()

        if self.config.maxdist is not None:
            console.print(f"Computed distances with a maximum distance of {self.config.maxdist}")
        else:
            console.print("Computed all distances")
        console.print("[bold green]✓[/bold green] Done")
        return self.results

    def _step_1_load_samples(self):
        """Step 1: Read input and encode samples."""
        start = time.perf_counter()
        cfg = self.config
        if cfg.input_format in ALIGNMENT_FORMATS:
            records = read_fasta_records(cfg.input)
        else:
            records = read_profile_records(cfg.input, sep=cfg.input_sep, skip_header=cfg.skip_header)

        store = SampleStore.load(records, cfg.input_format)
        console.print(f"Loaded {store.count()} samples with {store.n_symbols:,} {cfg.input_format} symbols each")

        n_removed = 0
        if cfg.drop_identical_columns:
            store, n_removed = drop_identical_columns(store, verbose=cfg.verbose)

        self._debug(f"  Reading time: {time.perf_counter() - start:.3f}s")
        self.results['step_1_input'] = {
            'store': store,
            'n_samples': store.count(),
            'n_symbols': store.n_symbols,
            'n_removed_columns': n_removed,
        }

    def _step_2_precomputed(self):
        """Step 2: Build the precomputed-distance index, if any."""
        if not self.config.precomputed:
            self.results['step_2_precomputed'] = {'index': None}
            return

        rows = read_precomputed_rows(self.config.precomputed, sep=self.config.output_sep)
        index = PrecomputedIndex.build(rows)
        console.print(f"Loaded {len(index):,} precomputed distances from {self.config.precomputed}")
        if index.conflicts:
            console.print(
                f"[yellow]Warning:[/yellow] {index.conflicts} precomputed pair(s) had conflicting "
                "distances; the last value was kept"
            )
        if index.self_pairs:
            self._debug(f"  Ignored {index.self_pairs} precomputed self-pair row(s)")
        self.results['step_2_precomputed'] = {'index': index, 'conflicts': index.conflicts}

    def _step_3_distances(self):
        """Step 3: Compute all pairwise distances."""
        start = time.perf_counter()
        store = self.results['step_1_input']['store']
        index = self.results['step_2_precomputed']['index']

        if store.count() < 2:
            console.print("[yellow]Fewer than two samples; nothing to compare[/yellow]")

        scheduler = PairScheduler(worker_count=self.worker_count, verbose=self.config.verbose)
        matrix = scheduler.run(store, precomputed=index, limit=self.config.maxdist)

        if matrix.precomputed_unresolved:
            console.print(
                f"[yellow]Warning:[/yellow] {matrix.precomputed_unresolved} precomputed pair(s) "
                "reference unknown samples and were skipped"
            )
        if index is not None:
            self._debug(f"  Reused {matrix.precomputed_hits:,} precomputed distances")
        self._debug(f"  Computing time: {time.perf_counter() - start:.3f}s")
        self.results['step_3_distances'] = {'matrix': matrix}

    def _step_4_write(self):
        """Step 4: Write the matrix in the requested layout."""
        start = time.perf_counter()
        cfg = self.config
        matrix = self.results['step_3_distances']['matrix']
        console.print(f"Writing distances to: {cfg.output}")
        write_distances(
            matrix, cfg.output, sep=cfg.output_sep,
            output_format=cfg.output_format, output_mode=cfg.output_mode,
        )
        self._debug(f"  Writing time: {time.perf_counter() - start:.3f}s")
        self.results['step_4_output'] = {'path': cfg.output}


def run_pipeline(config: DistanceConfig) -> Dict[str, Any]:
    """Run the complete distance pipeline.

    Parameters:
        config: DistanceConfig object with pipeline settings

    Returns:
        dict: Results from all steps (the DistanceMatrix is under
        results['step_3_distances']['matrix'])
    """
    pipeline = DistancePipeline(config)
    return pipeline.run()


__all__ = [
    'DistanceConfig',
    'DistancePipeline',
    'run_pipeline',
]
