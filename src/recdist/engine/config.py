"""Batch scoring configuration and result dataclasses."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass
class ScoringConfig:
    """Configuration for scoring a file of record pairs.

    Attributes
    ----------
    schema_path : Path
        Attribute schema JSON.
    distance_config_path : Path
        Distance schema JSON.
    output_path : Path
        Destination JSONL for pair distances.
    field_delim : str
        Regex separating record fields (default: ",").
    sub_field_delim : str
        Regex separating components within a field (default: ":").
    double_range : bool
        Allow one side of a double comparison to be a range.
    round_decimals : int | None
        Decimal places for output distances. None keeps full precision.
    """

    schema_path: Path
    distance_config_path: Path
    output_path: Path = Path("out/distances.jsonl")
    field_delim: str = ","
    sub_field_delim: str = ":"
    double_range: bool = False
    round_decimals: int | None = 6

    def __post_init__(self) -> None:
        """Coerce paths and validate."""
        self.schema_path = Path(self.schema_path)
        self.distance_config_path = Path(self.distance_config_path)
        self.output_path = Path(self.output_path)

        if not self.field_delim:
            raise ValueError("field_delim must not be empty")
        if not self.sub_field_delim:
            raise ValueError("sub_field_delim must not be empty")
        if self.round_decimals is not None and self.round_decimals < 0:
            raise ValueError(f"round_decimals must be >= 0, got {self.round_decimals}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        for key in ("schema_path", "distance_config_path", "output_path"):
            data[key] = str(data[key])
        return data


@dataclass
class ScoringResult:
    """Results from a batch scoring run.

    Attributes
    ----------
    success : bool
        Whether every pair was scored.
    pairs_in : int
        Pairs read from the input.
    pairs_scored : int
        Pairs with a computed distance.
    distance_buckets : dict[str, int]
        Histogram of distances.
    output_path : str | None
        Written JSONL path, None when the run failed.
    error_message : str | None
        Error message if failed.
    """

    success: bool
    pairs_in: int
    pairs_scored: int
    distance_buckets: dict[str, int]
    output_path: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
