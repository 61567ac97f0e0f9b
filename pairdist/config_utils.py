"""Configuration validation and helper utilities for the distance pipeline."""

import os

from rich.console import Console

from pairdist.core.formats import INPUT_FORMATS, OUTPUT_FORMATS, OUTPUT_MODES

console = Console(stderr=True)

_SEPARATOR_ESCAPES = {'\\t': '\t', 'tab': '\t', '\\s': ' ', 'space': ' '}


def unescape_separator(sep):
    """Turn a separator given on the command line ('\\t', 'tab', ',') into the character."""
    return _SEPARATOR_ESCAPES.get(sep, sep)


def resolve_worker_count(nproc=None):
    """Number of worker processes: ``nproc`` if given, else the CPUs this process may use."""
    if nproc is not None:
        return nproc
    try:
        return len(os.sched_getaffinity(0))
    except AttributeError:
        return os.cpu_count() or 1


def validate_config(config):
    """Validate DistanceConfig object.

    Parameters:
        config: DistanceConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    errors = []

    if not config.input:
        errors.append("input is required")
    elif config.input != '-' and not os.path.exists(config.input):
        errors.append(f"Input file not found: {config.input}")

    if not config.output:
        errors.append("output is required")

    if config.precomputed and not os.path.exists(config.precomputed):
        errors.append(f"Precomputed distance file not found: {config.precomputed}")

    if config.input_format not in INPUT_FORMATS:
        errors.append(f"input_format must be one of: {list(INPUT_FORMATS)}")
    if config.output_format not in OUTPUT_FORMATS:
        errors.append(f"output_format must be one of: {list(OUTPUT_FORMATS)}")
    if config.output_mode not in OUTPUT_MODES:
        errors.append(f"output_mode must be one of: {list(OUTPUT_MODES)}")

    if config.maxdist is not None and config.maxdist < 0:
        errors.append("maxdist must be >= 0")

    if config.nproc is not None and config.nproc < 1:
        errors.append("nproc must be >= 1")

    for field in ('input_sep', 'output_sep'):
        if len(getattr(config, field)) != 1:
            errors.append(f"{field} must be a single character")

    if errors:
        console.print("[bold red]Configuration Errors:[/bold red]")
        for error in errors:
            console.print(f"  ✗ {error}")
        raise ValueError(f"Invalid configuration: {len(errors)} error(s)")


def print_config_summary(config, worker_count=None):
    """Print a summary of the configuration."""
    console.print("\n[bold]Configuration Summary:[/bold]")
    console.print(f"  Input: {config.input} ({config.input_format})")
    console.print(f"  Output: {config.output} ({config.output_format}, {config.output_mode})")
    console.print(f"  Precomputed: {config.precomputed or 'none'}")
    console.print(f"  maxdist: {config.maxdist if config.maxdist is not None else 'none'}")
    console.print(f"  processes: {worker_count if worker_count is not None else config.nproc}")
    console.print(f"  drop_identical_columns: {config.drop_identical_columns}")


__all__ = [
    'validate_config',
    'print_config_summary',
    'resolve_worker_count',
    'unescape_separator',
]
