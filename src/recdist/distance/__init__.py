"""Inter-record distance engine.

This module computes a normalized distance between two delimited records
whose attributes are categorical, integer, double (point or range), text or
geo-location, then aggregates attribute distances into a final score.
"""

from recdist.distance.aggregators import AGGREGATORS, weighted_mean
from recdist.distance.comparators import (
    categorical_distance,
    geo_distance,
    haversine_distance,
    numeric_distance,
    range_distance,
)
from recdist.distance.engine import (
    DEFAULT_FIELD_DELIM,
    DEFAULT_SUB_FIELD_DELIM,
    InterRecordDistance,
    RecordDistance,
)
from recdist.distance.ranges import DoubleRange
from recdist.distance.text import (
    TextSimilarity,
    create_similarity_strategy,
    register_similarity_strategy,
)

__all__ = [
    # Engine
    "InterRecordDistance",
    "RecordDistance",
    "DEFAULT_FIELD_DELIM",
    "DEFAULT_SUB_FIELD_DELIM",
    # Comparators
    "categorical_distance",
    "numeric_distance",
    "range_distance",
    "geo_distance",
    "haversine_distance",
    "DoubleRange",
    # Aggregation
    "AGGREGATORS",
    "weighted_mean",
    # Text similarity
    "TextSimilarity",
    "create_similarity_strategy",
    "register_similarity_strategy",
]
