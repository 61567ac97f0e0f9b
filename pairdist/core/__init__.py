"""Core distance computation for aligned sequences and cgMLST profiles.

Submodules:
- samples: SampleStore and per-format encoding
- metrics: mismatch-count kernels
- precomputed: known distances reused across runs
- scheduler: parallel all-pairs computation
- matrix: condensed DistanceMatrix
- input / output: readers and writers
"""

__all__ = ['samples', 'metrics', 'precomputed', 'scheduler', 'matrix', 'input', 'output']
