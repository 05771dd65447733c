"""Per-type attribute distance functions.

This module provides pure, deterministic functions that map two attribute
values to a raw distance. Categorical and geo distances are normalized to
[0, 1] when configured to be; numeric distances are unbounded unless a
threshold clamps them.
"""

import math
import re

from recdist.distance.ranges import DoubleRange, parse_float
from recdist.errors import ConfigurationError, ParseError
from recdist.schema.models import Attribute, AttributeDistance

__all__ = [
    "EARTH_RADIUS",
    "categorical_distance",
    "numeric_distance",
    "range_distance",
    "parse_geo_point",
    "haversine_distance",
    "geo_distance",
]

# Earth radius in miles
EARTH_RADIUS = 3958.75


def categorical_distance(
    value_a: str,
    value_b: str,
    attr: Attribute,
    attr_dist: AttributeDistance,
) -> float:
    """Compare two categorical values.

    Parameters
    ----------
    value_a : str
        First category.
    value_b : str
        Second category.
    attr : Attribute
        Attribute descriptor (cardinality used by the 'cardinality' algorithm).
    attr_dist : AttributeDistance
        Distance settings for the attribute.

    Returns
    -------
    float
        0.0 when equal; otherwise ``sqrt(2) / |cardinality|`` for the
        'cardinality' algorithm, else 1.0.

    Raises
    ------
    ConfigurationError
        If 'cardinality' is requested for an attribute with no cardinality.
    """
    if value_a == value_b:
        return 0.0

    if attr_dist.algorithm == "cardinality":
        if not attr.cardinality:
            raise ConfigurationError(
                "Cardinality distance requires a non-empty cardinality set",
                ordinal=attr.ordinal,
            )
        return math.sqrt(2) / len(attr.cardinality)

    return 1.0


def numeric_distance(value_a: float, value_b: float, attr_dist: AttributeDistance) -> float:
    """Compare two numeric values.

    Parameters
    ----------
    value_a : float
        First value.
    value_b : float
        Second value.
    attr_dist : AttributeDistance
        Weight and threshold settings.

    Returns
    -------
    float
        ``|a - b|``, divided by the weight when set, then clamped by the
        thresholds.

    Notes
    -----
    Threshold order:
    - distance > upper_threshold: 1.0
    - otherwise distance > lower_threshold: 0.0

    Both thresholds trigger when the distance exceeds them.
    """
    dist = float(abs(value_a - value_b))

    if attr_dist.weight is not None:
        dist /= attr_dist.weight

    if attr_dist.upper_threshold is not None and dist > attr_dist.upper_threshold:
        dist = 1.0
    elif attr_dist.lower_threshold is not None and dist > attr_dist.lower_threshold:
        dist = 0.0

    return dist


def range_distance(value_range: DoubleRange, value: float, attr_dist: AttributeDistance) -> float:
    """Compare a point against an interval.

    Parameters
    ----------
    value_range : DoubleRange
        Interval side of the comparison.
    value : float
        Point side of the comparison.
    attr_dist : AttributeDistance
        Weight and threshold settings, applied to the distance from the
        nearest exceeded bound.

    Returns
    -------
    float
        0.0 when the point lies within the bounds (inclusive), otherwise the
        numeric distance to the bound it exceeds.
    """
    if value_range.contains(value):
        return 0.0
    if value > value_range.upper:
        return numeric_distance(value_range.upper, value, attr_dist)
    return numeric_distance(value, value_range.lower, attr_dist)


def parse_geo_point(
    value: str,
    delimiter: re.Pattern[str],
    ordinal: int | None = None,
) -> tuple[float, float]:
    """Parse a ``lat<delim>long`` field into a coordinate pair.

    Raises
    ------
    ParseError
        If the field does not hold exactly two numeric components.
    """
    items = delimiter.split(value)
    if len(items) != 2:
        raise ParseError("Geo location must be 'lat:long'", ordinal=ordinal, value=value)
    return parse_float(items[0], ordinal), parse_float(items[1], ordinal)


def haversine_distance(lat1: float, long1: float, lat2: float, long2: float) -> float:
    """Great-circle distance between two points, in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_long = math.radians(long2 - long1)
    a = math.sin(d_lat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(
        math.radians(lat2)
    ) * math.sin(d_long / 2) ** 2
    # Rounding can push a past 1.0 for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS * c


def geo_distance(
    value_a: str,
    value_b: str,
    attr_dist: AttributeDistance,
    delimiter: re.Pattern[str],
) -> float:
    """Compare two encoded geo locations.

    Both sides are split with the same sub-field delimiter. The distance is
    divided by ``max_geo_distance`` when configured.
    """
    lat1, long1 = parse_geo_point(value_a, delimiter, attr_dist.ordinal)
    lat2, long2 = parse_geo_point(value_b, delimiter, attr_dist.ordinal)
    dist = haversine_distance(lat1, long1, lat2, long2)

    if attr_dist.max_geo_distance is not None:
        dist /= attr_dist.max_geo_distance

    return dist
