"""pairdist: pairwise distances between aligned sequences or cgMLST profiles.

Simple CLI entry point that runs the distance pipeline.
"""

import argparse
import sys

from rich.console import Console

from pairdist import __version__
from pairdist.config_utils import unescape_separator
from pairdist.core.errors import PairdistError
from pairdist.core.formats import (
    FASTA, INPUT_FORMATS, LOWER_TRIANGLE, OUTPUT_FORMATS, OUTPUT_MODES, TABULAR,
)
from pairdist.main import DistanceConfig, run_pipeline

console = Console(stderr=True)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="pairdist",
        description="pairdist: all-pairs distance matrices for alignments and cgMLST profiles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pairdist alignment.fasta distances.tsv
  pairdist -i cgmlst --skip-header profiles.tsv - -o phylip
  pairdist -i cgmlst-hash -d 20 hashes.tsv new.tsv -p old.tsv
        """,
    )

    parser.add_argument("input", help="Input file, or '-' for stdin")
    parser.add_argument("output", help="Output file, or '-' for stdout")

    parser.add_argument(
        "-i", "--input-format",
        choices=INPUT_FORMATS,
        default=FASTA,
        help="Format of the input file (default: fasta). fasta-all counts all "
             "character differences, not just A/C/G/T",
    )
    parser.add_argument(
        "-o", "--output-format",
        choices=OUTPUT_FORMATS,
        default=TABULAR,
        help="Format of the output file (default: tabular)",
    )
    parser.add_argument(
        "-m", "--output-mode",
        choices=OUTPUT_MODES,
        default=LOWER_TRIANGLE,
        help="Write only the lower triangle or the full matrix (default: lower-triangle)",
    )
    parser.add_argument(
        "-p", "--precomputed",
        default=None,
        help="Tabular output of an earlier run; listed pairs are not computed again",
    )
    parser.add_argument(
        "--input-sep",
        default="\t",
        help="Separator of tabular input files (default: tab)",
    )
    parser.add_argument(
        "--output-sep",
        default="\t",
        help="Separator of the output (and precomputed) file (default: tab)",
    )
    parser.add_argument(
        "-d", "--maxdist",
        type=int,
        default=None,
        help="Stop counting once a distance exceeds this value; reported as '>MAXDIST'",
    )
    parser.add_argument(
        "-s", "--skip-header",
        action="store_true",
        help="Skip the first line of tabular input files",
    )
    parser.add_argument(
        "-t", "--threads",
        type=int,
        default=None,
        help="Number of worker processes (default: all available CPUs)",
    )
    parser.add_argument(
        "--drop-identical-columns",
        action="store_true",
        help="Skip positions/loci that are identical in all samples (faster, same result)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print configuration and timing details",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    config = DistanceConfig(
        input=args.input,
        output=args.output,
        input_format=args.input_format,
        output_format=args.output_format,
        output_mode=args.output_mode,
        precomputed=args.precomputed,
        input_sep=unescape_separator(args.input_sep),
        output_sep=unescape_separator(args.output_sep),
        maxdist=args.maxdist,
        skip_header=args.skip_header,
        nproc=args.threads,
        drop_identical_columns=args.drop_identical_columns,
        verbose=args.verbose,
    )

    try:
        run_pipeline(config)
        return 0
    except (PairdistError, ValueError, OSError) as e:
        console.print(f"✗ pairdist failed: {e}", style="bold red")
        return 1


if __name__ == "__main__":
    sys.exit(main())
