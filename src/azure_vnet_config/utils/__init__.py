"""Utility modules for logging, auditing and polling."""
from .logging_config import (
    setup_logging,
    timed,
    timed_section,
    perf_logger,
)
from .audit_log import setup_audit_logging, log_change, ChangeRecord
from .polling import poll_until, PollTimeout

__all__ = [
    "setup_logging",
    "timed",
    "timed_section",
    "perf_logger",
    "setup_audit_logging",
    "log_change",
    "ChangeRecord",
    "poll_until",
    "PollTimeout",
]
