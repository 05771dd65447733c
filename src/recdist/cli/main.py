"""Command-line interface for recdist.

Provides CLI commands for computing record distances.
"""

import importlib.metadata
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("recdist")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


F = TypeVar("F", bound=Callable[..., Any])


def _common_options(func: F) -> F:
    """Attach schema and delimiter options shared by all commands."""
    options = [
        click.option(
            "--schema",
            "-s",
            "schema_path",
            type=click.Path(exists=True, dir_okay=False),
            required=True,
            help="Attribute schema JSON file",
        ),
        click.option(
            "--distance-config",
            "-d",
            "distance_config_path",
            type=click.Path(exists=True, dir_okay=False),
            required=True,
            help="Distance configuration JSON file",
        ),
        click.option(
            "--field-delim",
            default=",",
            show_default=True,
            help="Regex separating record fields",
        ),
        click.option(
            "--sub-field-delim",
            default=":",
            show_default=True,
            help="Regex separating components within a field",
        ),
        click.option(
            "--double-range",
            is_flag=True,
            help="Allow one side of a double comparison to be a 'lower:upper' range",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="recdist")
def cli() -> None:
    """Schema-driven distance between delimited records.

    Use 'recdist COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("record_a")
@click.argument("record_b")
@_common_options
@click.option(
    "--explain",
    is_flag=True,
    help="Print attribute and group scores as JSON",
)
def compare(
    record_a: str,
    record_b: str,
    schema_path: str,
    distance_config_path: str,
    field_delim: str,
    sub_field_delim: str,
    double_range: bool,
    explain: bool,
) -> None:
    """Print the distance between RECORD_A and RECORD_B.

    Examples
    --------
        recdist compare "1,red,3.5" "2,blue,4.0" -s schema.json -d distance.json
        recdist compare "$A" "$B" -s schema.json -d distance.json --explain
    """
    from recdist.engine import ScoringConfig, build_engine

    try:
        config = ScoringConfig(
            schema_path=Path(schema_path),
            distance_config_path=Path(distance_config_path),
            field_delim=field_delim,
            sub_field_delim=sub_field_delim,
            double_range=double_range,
        )
        engine = build_engine(config)

        if explain:
            result = engine.explain(record_a, record_b)
            click.echo(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        else:
            click.echo(engine.find_distance(record_a, record_b))

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@_common_options
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Output JSONL file path",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(),
    default=None,
    help="Write JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def score(
    input_path: str,
    schema_path: str,
    distance_config_path: str,
    field_delim: str,
    sub_field_delim: str,
    double_range: bool,
    output: str,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Score every record pair in INPUT_PATH.

    INPUT_PATH is a JSONL file with one {"first": ..., "second": ...}
    object per line.

    Examples
    --------
        recdist score pairs.jsonl -s schema.json -d distance.json -o distances.jsonl
        recdist score pairs.jsonl -s schema.json -d distance.json -o out.jsonl --log run.jsonl
    """
    from recdist.audit import AuditLogger, generate_run_id
    from recdist.engine import ScoringConfig, score_pairs_file

    try:
        config = ScoringConfig(
            schema_path=Path(schema_path),
            distance_config_path=Path(distance_config_path),
            output_path=Path(output),
            field_delim=field_delim,
            sub_field_delim=sub_field_delim,
            double_range=double_range,
        )
    except ValueError as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"Scoring pairs from: {input_path}", err=True)

    logger = AuditLogger(generate_run_id(), Path(log_path)) if log_path else None
    try:
        result = score_pairs_file(input_path, config, logger=logger)
    finally:
        if logger:
            logger.close()

    if not result.success:
        click.secho(f"✗ Scoring failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    if verbose:
        click.echo("Distance buckets:", err=True)
        for label, count in result.distance_buckets.items():
            click.echo(f"  {label}: {count}", err=True)

    click.secho(f"✓ Scored {result.pairs_scored} pairs to {result.output_path}", fg="green")


if __name__ == "__main__":
    cli()
