"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from recdist.distance import InterRecordDistance  # noqa: E402
from recdist.schema import (  # noqa: E402
    AggregatorGroup,
    Attribute,
    AttributeDistance,
    AttributeSchema,
    AttributeType,
    DistanceSchema,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "recdist"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding schema, distance config and pair fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def make_engine() -> Callable[..., InterRecordDistance]:
    """Factory for engines over an explicit attribute list.

    ``attributes`` is a list of ``(ordinal, type)`` or ``Attribute`` items;
    ``aggregators`` defaults to one manhattan group over all non-id ordinals.
    """

    def _factory(
        attributes: list[Attribute | tuple[int, AttributeType]],
        *,
        distances: list[AttributeDistance] | None = None,
        aggregators: list[AggregatorGroup] | None = None,
        **kwargs: object,
    ) -> InterRecordDistance:
        attrs = tuple(
            a if isinstance(a, Attribute) else Attribute(ordinal=a[0], type=a[1])
            for a in attributes
        )
        if aggregators is None:
            ordinals = tuple(a.ordinal for a in attrs if not a.is_id)
            aggregators = [AggregatorGroup(algorithm="manhattan", ordinals=ordinals)]
        return InterRecordDistance(
            AttributeSchema(attributes=attrs),
            DistanceSchema(attributes=tuple(distances or ()), aggregators=tuple(aggregators)),
            **kwargs,  # type: ignore[arg-type]
        )

    return _factory
