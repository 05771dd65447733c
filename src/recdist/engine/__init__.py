"""Batch scoring of record pairs.

This package drives the distance engine over a file of record pairs and
writes one distance per pair, with audit events for the run.
"""

from recdist.engine.config import ScoringConfig, ScoringResult
from recdist.engine.runner import build_engine, score_pairs_file

__all__ = [
    "ScoringConfig",
    "ScoringResult",
    "build_engine",
    "score_pairs_file",
]
