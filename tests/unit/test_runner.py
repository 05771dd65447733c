"""Tests for the batch scoring runner and its configuration."""

import json
from pathlib import Path

import pytest

from recdist.engine import ScoringConfig, build_engine, score_pairs_file
from recdist.engine.runner import ID_SEPARATOR, get_distance_bucket, load_pairs
from recdist.errors import ParseError


@pytest.fixture
def config(fixtures_dir: Path, tmp_path: Path) -> ScoringConfig:
    """Scoring config over the fixture schemas, writing into tmp_path."""
    return ScoringConfig(
        schema_path=fixtures_dir / "schema.json",
        distance_config_path=fixtures_dir / "distance.json",
        output_path=tmp_path / "out" / "distances.jsonl",
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    ("distance", "expected"),
    [
        (0.0, "0.0-0.1"),
        (0.05, "0.0-0.1"),
        (0.1, "0.1-0.2"),
        (0.95, "0.9-1.0"),
        (1.0, "0.9-1.0"),
        (1.5, ">1.0"),
    ],
)
def test_get_distance_bucket(distance: float, expected: str) -> None:
    """Test bucket boundaries, including distances above 1."""
    assert get_distance_bucket(distance) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [{"field_delim": ""}, {"sub_field_delim": ""}, {"round_decimals": -1}],
)
def test_scoring_config_validation(fixtures_dir: Path, kwargs: dict) -> None:
    """Test invalid scoring config raises ValueError."""
    with pytest.raises(ValueError):
        ScoringConfig(
            schema_path=fixtures_dir / "schema.json",
            distance_config_path=fixtures_dir / "distance.json",
            **kwargs,
        )


@pytest.mark.unit
def test_scoring_config_to_dict(config: ScoringConfig) -> None:
    """Test paths serialize as strings."""
    data = config.to_dict()

    assert isinstance(data["schema_path"], str)
    assert data["field_delim"] == ","


@pytest.mark.unit
def test_build_engine_from_config(config: ScoringConfig) -> None:
    """Test the engine is built from both schema files."""
    engine = build_engine(config)

    assert engine.attr_schema.id_ordinals == (0,)
    assert not engine.double_range


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    ['not json', '["a", "b"]', '{"first": "a"}', '{"first": 1, "second": "b"}'],
)
def test_load_pairs_rejects_malformed_lines(tmp_path: Path, line: str) -> None:
    """Test malformed input lines raise ParseError."""
    path = tmp_path / "pairs.jsonl"
    path.write_text(line + "\n")

    with pytest.raises(ParseError):
        load_pairs(path)


@pytest.mark.unit
def test_load_pairs_skips_blank_lines(tmp_path: Path) -> None:
    """Test blank lines are ignored."""
    path = tmp_path / "pairs.jsonl"
    path.write_text('{"first": "a", "second": "b"}\n\n')

    assert load_pairs(path) == [("a", "b")]


@pytest.mark.unit
def test_score_pairs_file_writes_output(fixtures_dir: Path, config: ScoringConfig) -> None:
    """Test every pair is scored and written with record ids."""
    result = score_pairs_file(fixtures_dir / "pairs.jsonl", config)

    assert result.success
    assert result.pairs_in == 2
    assert result.pairs_scored == 2
    assert sum(result.distance_buckets.values()) == 2

    with config.output_path.open() as f:
        rows = [json.loads(line) for line in f]

    assert [(r["id_a"], r["id_b"]) for r in rows] == [("r1", "r2"), ("r3", "r3")]
    assert rows[1]["distance"] == 0.0


@pytest.mark.unit
def test_score_pairs_file_failure_writes_nothing(tmp_path: Path, config: ScoringConfig) -> None:
    """Test a bad pair fails the run without partial output."""
    pairs = tmp_path / "pairs.jsonl"
    pairs.write_text(
        json.dumps({"first": "r1,red,30,3.5,a,0:0", "second": "r2,red,30,3.5,a,0:0"})
        + "\n"
        + json.dumps({"first": "r1,red,old,3.5,a,0:0", "second": "r2,red,30,3.5,a,0:0"})
        + "\n"
    )

    result = score_pairs_file(pairs, config)

    assert not result.success
    assert result.pairs_in == 2
    assert result.pairs_scored == 0
    assert "ParseError" in result.error_message
    assert not config.output_path.exists()


@pytest.mark.unit
def test_score_pairs_file_joins_composite_ids(tmp_path: Path) -> None:
    """Test several identifier attributes form one id, independent of sub-field delim."""
    schema = tmp_path / "schema.json"
    schema.write_text(
        json.dumps(
            {
                "attributes": [
                    {"ordinal": 0, "type": "categorical", "id": True},
                    {"ordinal": 1, "type": "categorical", "id": True},
                    {"ordinal": 2, "type": "double"},
                ]
            }
        )
    )
    distance = tmp_path / "distance.json"
    distance.write_text(json.dumps({"aggregators": [{"algorithm": "manhattan", "ordinals": [2]}]}))
    pairs = tmp_path / "pairs.jsonl"
    pairs.write_text(json.dumps({"first": "a,1,2.0", "second": "b,2,3.0"}) + "\n")
    config = ScoringConfig(
        schema_path=schema,
        distance_config_path=distance,
        output_path=tmp_path / "distances.jsonl",
        sub_field_delim=";",
    )

    result = score_pairs_file(pairs, config)

    assert result.success
    row = json.loads(config.output_path.read_text())
    assert row["id_a"] == f"a{ID_SEPARATOR}1"
    assert row["id_b"] == f"b{ID_SEPARATOR}2"
    assert row["distance"] == 1.0
