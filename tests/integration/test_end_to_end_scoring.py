"""Integration tests for schema-driven record distance.

This module loads the JSON fixtures, scores record pairs through the engine
and the batch runner, and checks the numbers by hand.
"""

import json
import math
from pathlib import Path

import pytest

from recdist import InterRecordDistance, load_attribute_schema, load_distance_schema
from recdist.audit import AuditLogger
from recdist.engine import ScoringConfig, score_pairs_file

RECORD_A = "r1,red,30,3.5,big red car,40.0:-74.0"
RECORD_B = "r2,blue,40,4.0,big blue car,40.0:-74.0"

# color: sqrt(2)/4, age: 10/10, price: 0.5, title: jaccard 0.5, location: 0
# manhattan(age, price) = 0.75, categorical(color) = sqrt(2)/4,
# euclidean(title, location) = 0.25 with weight 2
EXPECTED = (0.75 + math.sqrt(2) / 4 + 0.25 * 2) / 4


@pytest.fixture
def engine(fixtures_dir: Path) -> InterRecordDistance:
    """Engine over the fixture schemas."""
    return InterRecordDistance(
        load_attribute_schema(fixtures_dir / "schema.json"),
        load_distance_schema(fixtures_dir / "distance.json"),
    )


@pytest.mark.integration
def test_fixture_pair_distance(engine: InterRecordDistance) -> None:
    """Test the hand-computed distance for the fixture pair."""
    result = engine.explain(RECORD_A, RECORD_B)

    assert result.attribute_distances[1] == pytest.approx(math.sqrt(2) / 4)
    assert result.attribute_distances[2] == pytest.approx(1.0)
    assert result.attribute_distances[3] == pytest.approx(0.5)
    assert result.attribute_distances[4] == pytest.approx(0.5)
    assert result.attribute_distances[5] == pytest.approx(0.0)
    assert result.distance == pytest.approx(EXPECTED)


@pytest.mark.integration
def test_distance_symmetric_for_fixture_pair(engine: InterRecordDistance) -> None:
    """Test swapping records does not change the distance."""
    assert engine.find_distance(RECORD_A, RECORD_B) == pytest.approx(
        engine.find_distance(RECORD_B, RECORD_A)
    )


@pytest.mark.integration
def test_age_upper_threshold_clamps(engine: InterRecordDistance) -> None:
    """Test an age gap above weight * threshold scores exactly 1."""
    far = RECORD_B.replace(",40,", ",95,")

    assert engine.explain(RECORD_A, far).attribute_distances[2] == 1.0


@pytest.mark.integration
def test_batch_run_matches_engine(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test batch scoring reproduces the engine result and logs the run."""
    config = ScoringConfig(
        schema_path=fixtures_dir / "schema.json",
        distance_config_path=fixtures_dir / "distance.json",
        output_path=tmp_path / "distances.jsonl",
        round_decimals=None,
    )

    with AuditLogger(run_id="it", log_path=tmp_path / "events.jsonl") as logger:
        result = score_pairs_file(fixtures_dir / "pairs.jsonl", config, logger=logger)

    assert result.success
    rows = [json.loads(line) for line in config.output_path.read_text().splitlines()]
    assert rows[0]["distance"] == pytest.approx(EXPECTED)
    assert rows[1]["distance"] == 0.0

    events = [json.loads(line) for line in (tmp_path / "events.jsonl").read_text().splitlines()]
    finished = events[-1]
    assert finished["event"] == "stage_finished"
    assert finished["data"]["counters"] == {"pairs_in": 2, "pairs_scored": 2}
