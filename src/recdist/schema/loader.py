"""JSON loaders for attribute schemas and distance schemas.

Documents are validated with JSON Schema before conversion into the
immutable models in :mod:`recdist.schema.models`.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema

from recdist.errors import ConfigurationError
from recdist.schema.models import (
    AggregatorGroup,
    Attribute,
    AttributeDistance,
    AttributeSchema,
    AttributeType,
    DistanceSchema,
)

__all__ = [
    "ATTRIBUTE_SCHEMA_JSON_SCHEMA",
    "DISTANCE_SCHEMA_JSON_SCHEMA",
    "attribute_schema_from_dict",
    "distance_schema_from_dict",
    "load_attribute_schema",
    "load_distance_schema",
]

_NUMBER_OR_NULL = {"type": ["number", "null"]}

ATTRIBUTE_SCHEMA_JSON_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["attributes"],
    "properties": {
        "attributes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["ordinal", "type"],
                "properties": {
                    "name": {"type": "string"},
                    "ordinal": {"type": "integer", "minimum": 0},
                    "type": {"type": "string"},
                    "id": {"type": "boolean"},
                    "cardinality": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}

DISTANCE_SCHEMA_JSON_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["aggregators"],
    "properties": {
        "attributes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["ordinal"],
                "properties": {
                    "ordinal": {"type": "integer", "minimum": 0},
                    "algorithm": {"type": ["string", "null"]},
                    "weight": _NUMBER_OR_NULL,
                    "upper_threshold": _NUMBER_OR_NULL,
                    "lower_threshold": _NUMBER_OR_NULL,
                    "max_geo_distance": _NUMBER_OR_NULL,
                    "params": {"type": "object"},
                },
            },
        },
        "aggregators": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["algorithm", "ordinals"],
                "properties": {
                    "algorithm": {"type": "string"},
                    "ordinals": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0},
                        "minItems": 1,
                    },
                    "weight": {"type": "number", "minimum": 0},
                    "param": _NUMBER_OR_NULL,
                },
            },
        },
    },
}


def _validate(document: Any, schema: dict[str, Any], kind: str) -> None:
    try:
        jsonschema.validate(instance=document, schema=schema)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(f"Invalid {kind} at {location}: {e.message}") from e


def _read_json(path: Path | str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    with file_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def attribute_schema_from_dict(document: dict[str, Any]) -> AttributeSchema:
    """Build an attribute schema from a parsed JSON document.

    Parameters
    ----------
    document : dict[str, Any]
        Document with an ``attributes`` list.

    Returns
    -------
    AttributeSchema
        Validated attribute schema.

    Raises
    ------
    ConfigurationError
        If the document is malformed or declares an unknown type.
    """
    _validate(document, ATTRIBUTE_SCHEMA_JSON_SCHEMA, "attribute schema")
    attributes = tuple(
        Attribute(
            ordinal=item["ordinal"],
            type=AttributeType.parse(item["type"]),
            name=item.get("name"),
            is_id=item.get("id", False),
            cardinality=tuple(item.get("cardinality", ())),
        )
        for item in document["attributes"]
    )
    return AttributeSchema(attributes=attributes)


def distance_schema_from_dict(document: dict[str, Any]) -> DistanceSchema:
    """Build a distance schema from a parsed JSON document.

    Parameters
    ----------
    document : dict[str, Any]
        Document with ``attributes`` and ``aggregators`` lists.

    Returns
    -------
    DistanceSchema
        Validated distance schema.

    Raises
    ------
    ConfigurationError
        If the document is malformed.
    """
    _validate(document, DISTANCE_SCHEMA_JSON_SCHEMA, "distance schema")
    attributes = tuple(
        AttributeDistance(
            ordinal=item["ordinal"],
            algorithm=item.get("algorithm"),
            weight=item.get("weight"),
            upper_threshold=item.get("upper_threshold"),
            lower_threshold=item.get("lower_threshold"),
            max_geo_distance=item.get("max_geo_distance"),
            params=dict(item.get("params", {})),
        )
        for item in document.get("attributes", [])
    )
    aggregators = tuple(
        AggregatorGroup(
            algorithm=item["algorithm"],
            ordinals=tuple(item["ordinals"]),
            weight=item.get("weight", 1.0),
            param=item.get("param"),
        )
        for item in document["aggregators"]
    )
    return DistanceSchema(attributes=attributes, aggregators=aggregators)


def load_attribute_schema(path: Path | str) -> AttributeSchema:
    """Load an attribute schema from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigurationError
        If the document is invalid.
    """
    return attribute_schema_from_dict(_read_json(path))


def load_distance_schema(path: Path | str) -> DistanceSchema:
    """Load a distance schema from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigurationError
        If the document is invalid.
    """
    return distance_schema_from_dict(_read_json(path))
