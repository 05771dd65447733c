"""Schema-driven distance between heterogeneous delimited records.

This package provides:
- Schema (recdist.schema): attribute layout and distance configuration
- Distance (recdist.distance): per-attribute distances and aggregation
- Engine (recdist.engine): batch scoring of record pairs
- Audit (recdist.audit): JSONL event logging
- CLI (recdist.cli): command-line interface
"""

__version__ = "0.1.0"
__license__ = "MIT"

from recdist.distance import InterRecordDistance, RecordDistance
from recdist.errors import ConfigurationError, ParseError, RecordDistanceError
from recdist.schema import load_attribute_schema, load_distance_schema

__all__ = [
    "__version__",
    "__license__",
    "InterRecordDistance",
    "RecordDistance",
    "load_attribute_schema",
    "load_distance_schema",
    "RecordDistanceError",
    "ParseError",
    "ConfigurationError",
]
