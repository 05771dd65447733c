"""Batch runner scoring a JSONL file of record pairs.

Input lines are JSON objects ``{"first": <record>, "second": <record>}``.
Output lines are ``{"index", "id_a", "id_b", "distance"}``, written only
once every pair has been scored.
"""

import json
import re
import time
from pathlib import Path
from typing import Any

from recdist.audit.logger import AuditLogger
from recdist.distance.engine import InterRecordDistance
from recdist.engine.config import ScoringConfig, ScoringResult
from recdist.errors import ParseError
from recdist.schema import load_attribute_schema, load_distance_schema

__all__ = [
    "ID_SEPARATOR",
    "build_engine",
    "get_distance_bucket",
    "load_pairs",
    "score_pairs_file",
]

_STAGE = "pair_scoring"

# Joins the values of several identifier attributes into one record id
ID_SEPARATOR = ":"

# ---------------------------------------------------------------------------
# Bucket calculation
# ---------------------------------------------------------------------------

_BUCKET_THRESHOLDS = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)
_BUCKET_LABELS = (
    "0.0-0.1",
    "0.1-0.2",
    "0.2-0.3",
    "0.3-0.4",
    "0.4-0.5",
    "0.5-0.6",
    "0.6-0.7",
    "0.7-0.8",
    "0.8-0.9",
    "0.9-1.0",
    ">1.0",
)


def get_distance_bucket(distance: float) -> str:
    """Get bucket label for a distance value.

    Parameters
    ----------
    distance : float
        Record distance (usually 0.0-1.0, may exceed 1.0).

    Returns
    -------
    str
        Bucket label (e.g., '0.5-0.6'). Exactly 1.0 falls in '0.9-1.0'.
    """
    for i, threshold in enumerate(_BUCKET_THRESHOLDS):
        if distance < threshold:
            return _BUCKET_LABELS[i]
    if distance == 1.0:
        return _BUCKET_LABELS[-2]
    return _BUCKET_LABELS[-1]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_engine(config: ScoringConfig) -> InterRecordDistance:
    """Load both schemas and construct a distance engine.

    Raises
    ------
    FileNotFoundError
        If a schema file does not exist.
    ConfigurationError
        If a schema is invalid.
    """
    attr_schema = load_attribute_schema(config.schema_path)
    distance_schema = load_distance_schema(config.distance_config_path)
    return InterRecordDistance(
        attr_schema,
        distance_schema,
        config.field_delim,
        sub_field_delim=config.sub_field_delim,
        double_range=config.double_range,
    )


def load_pairs(input_path: Path) -> list[tuple[str, str]]:
    """Load record pairs from a JSONL file.

    Raises
    ------
    ParseError
        If a line is not a JSON object with string ``first``/``second``.
    """
    pairs: list[tuple[str, str]] = []
    with input_path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                item = json.loads(line)
            except json.JSONDecodeError as e:
                raise ParseError(f"Invalid JSON on line {line_no}: {e.msg}") from e
            if (
                not isinstance(item, dict)
                or not isinstance(item.get("first"), str)
                or not isinstance(item.get("second"), str)
            ):
                raise ParseError(f"Line {line_no} must have string 'first' and 'second' records")
            pairs.append((item["first"], item["second"]))
    return pairs


def _record_id(fields: list[str], id_ordinals: tuple[int, ...]) -> str | None:
    if not id_ordinals:
        return None
    return ID_SEPARATOR.join(fields[o] if o < len(fields) else "" for o in id_ordinals)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def score_pairs_file(
    input_path: Path | str,
    config: ScoringConfig,
    logger: AuditLogger | None = None,
) -> ScoringResult:
    """Score every record pair in ``input_path`` and write distances.

    Parameters
    ----------
    input_path : Path | str
        JSONL file of record pairs.
    config : ScoringConfig
        Schemas, delimiters and output settings.
    logger : AuditLogger | None, optional
        Audit logger for events. If None, no logging.

    Returns
    -------
    ScoringResult
        Counters and output path. A failure on any pair fails the whole run
        and no output is written.
    """
    start = time.perf_counter()
    buckets = dict.fromkeys(_BUCKET_LABELS, 0)
    pairs_in = 0
    index = -1

    if logger:
        logger.stage_started(_STAGE, parameters=config.to_dict())

    try:
        engine = build_engine(config)
        field_delim = re.compile(config.field_delim)
        id_ordinals = engine.attr_schema.id_ordinals

        pairs = load_pairs(Path(input_path))
        pairs_in = len(pairs)

        rows: list[dict[str, Any]] = []
        for index, (first, second) in enumerate(pairs):
            distance = engine.find_distance(first, second)
            if config.round_decimals is not None:
                distance = round(distance, config.round_decimals)
            buckets[get_distance_bucket(distance)] += 1
            rows.append(
                {
                    "index": index,
                    "id_a": _record_id(field_delim.split(first), id_ordinals),
                    "id_b": _record_id(field_delim.split(second), id_ordinals),
                    "distance": distance,
                }
            )
        index = -1

        output_path = config.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            for row in rows:
                json.dump(row, f, sort_keys=True)
                f.write("\n")

    except Exception as e:
        if logger:
            if index >= 0:
                logger.pair_failed(index, e)
            else:
                logger.event(
                    "error",
                    data={"exception_class": type(e).__name__, "message": str(e)},
                    level="ERROR",
                )
            logger.stage_finished(_STAGE, time.perf_counter() - start)
        return ScoringResult(
            success=False,
            pairs_in=pairs_in,
            pairs_scored=0,
            distance_buckets=buckets,
            error_message=f"{type(e).__name__}: {e}",
        )

    if logger:
        logger.artifact_written(str(output_path), record_count=len(rows))
        logger.stage_finished(
            _STAGE,
            time.perf_counter() - start,
            counters={"pairs_in": pairs_in, "pairs_scored": len(rows)},
        )

    return ScoringResult(
        success=True,
        pairs_in=pairs_in,
        pairs_scored=len(rows),
        distance_buckets=buckets,
        output_path=str(output_path),
    )
