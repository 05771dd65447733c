"""Structured JSONL audit logging for scoring runs."""

from recdist.audit.logger import AuditLogger
from recdist.audit.models import LogEvent
from recdist.utils import generate_run_id

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
]
