"""Data models for attribute layout and distance configuration.

This module defines the immutable description of a delimited record
(attribute ordinals, types, identifier flags, categorical cardinality) and
the per-attribute and per-group distance settings consumed by the engine.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from recdist.errors import ConfigurationError

__all__ = [
    "AttributeType",
    "Attribute",
    "AttributeSchema",
    "AttributeDistance",
    "AggregatorGroup",
    "DistanceSchema",
]


class AttributeType(Enum):
    """Closed set of attribute types, each with its own distance function."""

    CATEGORICAL = "categorical"
    INTEGER = "integer"
    DOUBLE = "double"
    TEXT = "text"
    GEO_LOCATION = "geo_location"

    @classmethod
    def parse(cls, name: str) -> "AttributeType":
        """Resolve a type name, accepting the short aliases used in config files.

        Parameters
        ----------
        name : str
            Type name (e.g., 'categorical', 'int', 'geoLocation').

        Returns
        -------
        AttributeType
            Matching attribute type.

        Raises
        ------
        ConfigurationError
            If the name is not a known type.
        """
        resolved = _TYPE_ALIASES.get(name, name)
        try:
            return cls(resolved)
        except ValueError:
            raise ConfigurationError(f"Unknown attribute type: {name}") from None


_TYPE_ALIASES = {
    "int": "integer",
    "geoLocation": "geo_location",
}


@dataclass(frozen=True, slots=True)
class Attribute:
    """Descriptor for one attribute of a delimited record.

    Attributes
    ----------
    ordinal : int
        Zero-based field position within the record.
    type : AttributeType
        Declared type, selects the distance function.
    name : str | None
        Human-readable attribute name.
    is_id : bool
        Identifier attributes are excluded from distance computation.
    cardinality : tuple[str, ...]
        Known category values (categorical attributes only).
    """

    ordinal: int
    type: AttributeType
    name: str | None = None
    is_id: bool = False
    cardinality: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class AttributeSchema:
    """Ordered collection of attribute descriptors."""

    attributes: tuple[Attribute, ...]

    def __post_init__(self) -> None:
        """Reject duplicate or negative ordinals."""
        seen: set[int] = set()
        for attr in self.attributes:
            if attr.ordinal < 0:
                raise ConfigurationError("Attribute ordinal must be >= 0", ordinal=attr.ordinal)
            if attr.ordinal in seen:
                raise ConfigurationError("Duplicate attribute ordinal", ordinal=attr.ordinal)
            seen.add(attr.ordinal)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def find_by_ordinal(self, ordinal: int) -> Attribute | None:
        """Return the attribute at ``ordinal``, or None if undeclared."""
        for attr in self.attributes:
            if attr.ordinal == ordinal:
                return attr
        return None

    @property
    def id_ordinals(self) -> tuple[int, ...]:
        """Ordinals of identifier attributes, in declaration order."""
        return tuple(attr.ordinal for attr in self.attributes if attr.is_id)


@dataclass(frozen=True, slots=True)
class AttributeDistance:
    """Distance settings for a single attribute ordinal.

    Attributes
    ----------
    ordinal : int
        Attribute ordinal the settings apply to.
    algorithm : str | None
        Algorithm selector: 'cardinality' for categorical attributes,
        similarity strategy name for text attributes.
    weight : float | None
        Divides raw numeric distance when set.
    upper_threshold : float | None
        Numeric distance above this value becomes 1.
    lower_threshold : float | None
        Numeric distance above this value becomes 0 (checked after the
        upper threshold).
    max_geo_distance : float | None
        Normalizes geo-location distance when set.
    params : dict[str, Any]
        Extra strategy parameters (e.g., MinHash ``num_perm``).
    """

    ordinal: int
    algorithm: str | None = None
    weight: float | None = None
    upper_threshold: float | None = None
    lower_threshold: float | None = None
    max_geo_distance: float | None = None
    params: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.weight is not None and self.weight == 0:
            raise ConfigurationError("Attribute weight must be non-zero", ordinal=self.ordinal)
        if self.max_geo_distance is not None and self.max_geo_distance <= 0:
            raise ConfigurationError("max_geo_distance must be positive", ordinal=self.ordinal)


@dataclass(frozen=True, slots=True)
class AggregatorGroup:
    """Named subset of ordinals combined into one group score.

    Attributes
    ----------
    algorithm : str
        'euclidean', 'manhattan', 'minkowski' or 'categorical'.
    ordinals : tuple[int, ...]
        Attribute ordinals covered by the group.
    weight : float
        Contribution of the group to the final weighted mean.
    param : float | None
        Power ``p`` for minkowski aggregation.
    """

    algorithm: str
    ordinals: tuple[int, ...]
    weight: float = 1.0
    param: float | None = None


@dataclass(frozen=True, slots=True)
class DistanceSchema:
    """Per-attribute distance settings plus aggregator groups."""

    attributes: tuple[AttributeDistance, ...] = ()
    aggregators: tuple[AggregatorGroup, ...] = ()
    _by_ordinal: dict[int, AttributeDistance] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        """Index attribute settings by ordinal."""
        by_ordinal: dict[int, AttributeDistance] = {}
        for attr_dist in self.attributes:
            if attr_dist.ordinal in by_ordinal:
                raise ConfigurationError(
                    "Duplicate attribute distance entry", ordinal=attr_dist.ordinal
                )
            by_ordinal[attr_dist.ordinal] = attr_dist
        object.__setattr__(self, "_by_ordinal", by_ordinal)

    def find_by_ordinal(self, ordinal: int) -> AttributeDistance:
        """Return settings for ``ordinal``, or empty defaults when none are configured."""
        attr_dist = self._by_ordinal.get(ordinal)
        if attr_dist is None:
            return AttributeDistance(ordinal=ordinal)
        return attr_dist
