"""Attribute layout and distance configuration models.

This package provides the static description of a delimited record and the
per-attribute and per-group settings consumed by the distance engine, along
with JSON loaders for both.
"""

from recdist.schema.loader import (
    attribute_schema_from_dict,
    distance_schema_from_dict,
    load_attribute_schema,
    load_distance_schema,
)
from recdist.schema.models import (
    AggregatorGroup,
    Attribute,
    AttributeDistance,
    AttributeSchema,
    AttributeType,
    DistanceSchema,
)

__all__ = [
    # Models
    "AttributeType",
    "Attribute",
    "AttributeSchema",
    "AttributeDistance",
    "AggregatorGroup",
    "DistanceSchema",
    # Loaders
    "attribute_schema_from_dict",
    "distance_schema_from_dict",
    "load_attribute_schema",
    "load_distance_schema",
]
