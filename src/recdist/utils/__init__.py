"""Shared utility functions."""

from recdist.utils.timestamps import generate_run_id, get_iso_timestamp

__all__ = ["get_iso_timestamp", "generate_run_id"]
