"""Aggregation of attribute distances into group scores.

Each aggregator combines the distances of its ordinals into one score; the
final record distance is the weight-normalized mean of all group scores.
"""

import math
from collections.abc import Callable, Mapping, Sequence

from recdist.errors import ConfigurationError
from recdist.schema.models import AggregatorGroup

__all__ = [
    "Aggregator",
    "AGGREGATORS",
    "aggregate_euclidean",
    "aggregate_manhattan",
    "aggregate_minkowski",
    "aggregate_categorical",
    "resolve_aggregator",
    "group_score",
    "weighted_mean",
]

# (distances, param) -> group score
Aggregator = Callable[[Sequence[float], float | None], float]


def aggregate_euclidean(distances: Sequence[float], param: float | None = None) -> float:
    """``sqrt(sum(d^2)) / n``."""
    return math.sqrt(sum(d * d for d in distances)) / len(distances)


def aggregate_manhattan(distances: Sequence[float], param: float | None = None) -> float:
    """``sum(d) / n``."""
    return sum(distances) / len(distances)


def aggregate_minkowski(distances: Sequence[float], param: float | None = None) -> float:
    """``sum(d^p)^(1/p) / n``.

    Raises
    ------
    ConfigurationError
        If ``param`` is missing or not positive.
    """
    if param is None or param <= 0:
        raise ConfigurationError(f"Minkowski aggregation requires a positive param, got {param}")
    total = sum(math.pow(d, param) for d in distances)
    return math.pow(total, 1.0 / param) / len(distances)


def aggregate_categorical(distances: Sequence[float], param: float | None = None) -> float:
    """Mean of categorical distances, ``sum(d) / n``."""
    return sum(distances) / len(distances)


AGGREGATORS: dict[str, Aggregator] = {
    "euclidean": aggregate_euclidean,
    "manhattan": aggregate_manhattan,
    "minkowski": aggregate_minkowski,
    # Misspelling accepted by older configuration files
    "minkwoski": aggregate_minkowski,
    "categorical": aggregate_categorical,
}


def resolve_aggregator(group: AggregatorGroup) -> Aggregator:
    """Look up and validate the aggregator function for ``group``.

    Raises
    ------
    ConfigurationError
        If the algorithm is unknown, the group has no ordinals, its weight is
        negative, or a minkowski group lacks a positive param.
    """
    aggregator = AGGREGATORS.get(group.algorithm)
    if aggregator is None:
        available = ", ".join(sorted(AGGREGATORS))
        raise ConfigurationError(
            f"Unknown aggregator algorithm: {group.algorithm}. Available: {available}"
        )
    if not group.ordinals:
        raise ConfigurationError(f"Aggregator '{group.algorithm}' has no ordinals")
    if group.weight < 0:
        raise ConfigurationError(f"Aggregator weight must be >= 0, got {group.weight}")
    if aggregator is aggregate_minkowski and (group.param is None or group.param <= 0):
        raise ConfigurationError(
            f"Minkowski aggregation requires a positive param, got {group.param}"
        )
    return aggregator


def group_score(
    group: AggregatorGroup,
    aggregator: Aggregator,
    attr_distances: Mapping[int, float],
) -> float:
    """Score one aggregator group from the current pair's attribute distances.

    Raises
    ------
    ConfigurationError
        If the group references an ordinal with no computed distance.
    """
    distances: list[float] = []
    for ordinal in group.ordinals:
        dist = attr_distances.get(ordinal)
        if dist is None:
            raise ConfigurationError(
                f"Aggregator '{group.algorithm}' references an ordinal with no attribute distance",
                ordinal=ordinal,
            )
        distances.append(dist)
    return aggregator(distances, group.param)


def weighted_mean(scores: Sequence[tuple[float, float]]) -> float:
    """Weight-normalized mean of ``(score, weight)`` pairs.

    Raises
    ------
    ConfigurationError
        If there are no scores or the weights sum to zero.
    """
    sum_weight = sum(weight for _, weight in scores)
    if not scores or sum_weight == 0:
        raise ConfigurationError("Aggregator weights must sum to a positive value")
    return sum(score * weight for score, weight in scores) / sum_weight
