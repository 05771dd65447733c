"""Schema-driven distance between two delimited records.

The engine splits both records into fields, computes one distance per
non-identifier attribute using the function selected by the attribute's
type, combines those distances within each aggregator group and returns the
weighted mean of the group scores.

Per-pair state (split fields, attribute distances) lives only for the
duration of a call. The one piece of state kept across calls is the text
similarity strategy cache, so an engine instance must not be shared between
threads.
"""

import re
from dataclasses import dataclass
from typing import Any, assert_never

from recdist.distance.aggregators import group_score, resolve_aggregator, weighted_mean
from recdist.distance.comparators import (
    categorical_distance,
    geo_distance,
    numeric_distance,
    range_distance,
)
from recdist.distance.ranges import DoubleRange, parse_float
from recdist.distance.text import StrategyFactory, TextSimilarity, create_similarity_strategy
from recdist.errors import ConfigurationError, ParseError
from recdist.schema.models import (
    Attribute,
    AttributeDistance,
    AttributeSchema,
    AttributeType,
    DistanceSchema,
)

__all__ = [
    "DEFAULT_FIELD_DELIM",
    "DEFAULT_SUB_FIELD_DELIM",
    "InterRecordDistance",
    "RecordDistance",
]

DEFAULT_FIELD_DELIM = ","
DEFAULT_SUB_FIELD_DELIM = ":"


@dataclass(frozen=True, slots=True)
class RecordDistance:
    """Distance between two records with its intermediate scores.

    Attributes
    ----------
    distance : float
        Final weighted distance.
    attribute_distances : dict[int, float]
        Per-ordinal attribute distances.
    group_scores : tuple[float, ...]
        One score per aggregator group, in configuration order.
    """

    distance: float
    attribute_distances: dict[int, float]
    group_scores: tuple[float, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "distance": self.distance,
            "attribute_distances": {str(k): v for k, v in self.attribute_distances.items()},
            "group_scores": list(self.group_scores),
        }


_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)


def _parse_int(value: str, ordinal: int) -> int:
    if not _INTEGER.fullmatch(value):
        raise ParseError("Field is not a valid integer", ordinal=ordinal, value=value)
    return int(value)


class InterRecordDistance:
    """Distance engine bound to one attribute schema and distance schema.

    Attributes
    ----------
    attr_schema : AttributeSchema
        Record layout.
    distance_schema : DistanceSchema
        Per-attribute settings and aggregator groups.
    double_range : bool
        When True, one side of a double comparison may be a range.
    """

    def __init__(
        self,
        attr_schema: AttributeSchema,
        distance_schema: DistanceSchema,
        field_delim: str = DEFAULT_FIELD_DELIM,
        *,
        sub_field_delim: str = DEFAULT_SUB_FIELD_DELIM,
        double_range: bool = False,
        strategy_factory: StrategyFactory = create_similarity_strategy,
    ) -> None:
        """Initialize engine and resolve aggregator algorithms.

        Parameters
        ----------
        attr_schema : AttributeSchema
            Record layout.
        distance_schema : DistanceSchema
            Per-attribute settings and aggregator groups.
        field_delim : str, optional
            Regex separating top-level fields, by default ",".
        sub_field_delim : str, optional
            Regex separating components within a field, by default ":".
        double_range : bool, optional
            Enable range-mode for double attributes, by default False.
        strategy_factory : StrategyFactory, optional
            Builds a text similarity strategy from attribute settings.

        Raises
        ------
        ConfigurationError
            If there are no aggregator groups or one of them is invalid.
        """
        self.attr_schema = attr_schema
        self.distance_schema = distance_schema
        self.double_range = double_range
        self._field_delim = re.compile(field_delim)
        self._sub_field_delim = re.compile(sub_field_delim)
        self._strategy_factory = strategy_factory
        self._text_strategies: dict[int, TextSimilarity] = {}

        if not distance_schema.aggregators:
            raise ConfigurationError("Distance schema has no aggregator groups")
        self._aggregators = tuple(
            (group, resolve_aggregator(group)) for group in distance_schema.aggregators
        )

    def with_sub_field_delim(self, sub_field_delim: str) -> "InterRecordDistance":
        """Set the sub-field delimiter regex and return self."""
        self._sub_field_delim = re.compile(sub_field_delim)
        return self

    def with_double_range(self, double_range: bool) -> "InterRecordDistance":
        """Enable or disable range-mode and return self."""
        self.double_range = double_range
        return self

    @property
    def cached_strategies(self) -> dict[int, TextSimilarity]:
        """Snapshot of the text similarity strategies built so far, by ordinal."""
        return dict(self._text_strategies)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_distance(self, first: str, second: str) -> float:
        """Distance between two delimited records.

        Parameters
        ----------
        first : str
            First record.
        second : str
            Second record, same layout as the first.

        Returns
        -------
        float
            Weighted mean of the aggregator group scores.

        Raises
        ------
        ParseError
            If a field cannot be parsed as its declared type.
        ConfigurationError
            If schema and configuration are inconsistent.
        """
        return self.explain(first, second).distance

    def explain(self, first: str, second: str) -> RecordDistance:
        """Distance between two records, with attribute and group scores."""
        attr_distances = self.attribute_distances(first, second)

        scored: list[tuple[float, float]] = []
        for group, aggregator in self._aggregators:
            scored.append((group_score(group, aggregator, attr_distances), group.weight))

        return RecordDistance(
            distance=weighted_mean(scored),
            attribute_distances=attr_distances,
            group_scores=tuple(score for score, _ in scored),
        )

    def attribute_distances(self, first: str, second: str) -> dict[int, float]:
        """Per-ordinal distances for every non-identifier attribute."""
        first_items = self._field_delim.split(first)
        second_items = self._field_delim.split(second)

        distances: dict[int, float] = {}
        for attr in self.attr_schema:
            if attr.is_id:
                continue

            ordinal = attr.ordinal
            if ordinal >= len(first_items) or ordinal >= len(second_items):
                raise ConfigurationError(
                    f"Record has {min(len(first_items), len(second_items))} fields",
                    ordinal=ordinal,
                )

            distances[ordinal] = self._attribute_distance(
                attr, first_items[ordinal], second_items[ordinal]
            )

        return distances

    # ------------------------------------------------------------------
    # Per-type handlers
    # ------------------------------------------------------------------

    def _attribute_distance(self, attr: Attribute, value_a: str, value_b: str) -> float:
        attr_dist = self.distance_schema.find_by_ordinal(attr.ordinal)
        match attr.type:
            case AttributeType.CATEGORICAL:
                return self._categorical_distance(attr, attr_dist, value_a, value_b)
            case AttributeType.INTEGER:
                return self._integer_distance(attr, attr_dist, value_a, value_b)
            case AttributeType.DOUBLE:
                return self._double_distance(attr, attr_dist, value_a, value_b)
            case AttributeType.TEXT:
                return self._text_distance(attr, attr_dist, value_a, value_b)
            case AttributeType.GEO_LOCATION:
                return self._geo_distance(attr, attr_dist, value_a, value_b)
            case _:
                assert_never(attr.type)

    def _categorical_distance(
        self, attr: Attribute, attr_dist: AttributeDistance, value_a: str, value_b: str
    ) -> float:
        return categorical_distance(value_a, value_b, attr, attr_dist)

    def _integer_distance(
        self, attr: Attribute, attr_dist: AttributeDistance, value_a: str, value_b: str
    ) -> float:
        return numeric_distance(
            _parse_int(value_a, attr.ordinal), _parse_int(value_b, attr.ordinal), attr_dist
        )

    def _double_distance(
        self, attr: Attribute, attr_dist: AttributeDistance, value_a: str, value_b: str
    ) -> float:
        ordinal = attr.ordinal
        if not self.double_range:
            return numeric_distance(
                parse_float(value_a, ordinal), parse_float(value_b, ordinal), attr_dist
            )

        range_a = DoubleRange.parse(value_a, self._sub_field_delim, ordinal)
        if range_a is not None:
            return range_distance(range_a, parse_float(value_b, ordinal), attr_dist)

        range_b = DoubleRange.parse(value_b, self._sub_field_delim, ordinal)
        if range_b is not None:
            return range_distance(range_b, parse_float(value_a, ordinal), attr_dist)

        raise ConfigurationError("No range data found in field", ordinal=ordinal, value=value_a)

    def _text_distance(
        self, attr: Attribute, attr_dist: AttributeDistance, value_a: str, value_b: str
    ) -> float:
        strategy = self._text_strategies.get(attr.ordinal)
        if strategy is None:
            # Not cached until construction succeeds
            strategy = self._strategy_factory(attr_dist)
            self._text_strategies[attr.ordinal] = strategy
        return strategy.distance(value_a, value_b)

    def _geo_distance(
        self, attr: Attribute, attr_dist: AttributeDistance, value_a: str, value_b: str
    ) -> float:
        return geo_distance(value_a, value_b, attr_dist, self._sub_field_delim)
