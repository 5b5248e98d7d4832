"""
Result reporting: where observations go once a frame has been processed.
"""

from models.config import ReportingConfig
from .base import ResultReporter
from .reporters import JsonlReporter, LoggingReporter
from .async_reporter import AsyncReporter


def create_reporter(cfg: ReportingConfig) -> ResultReporter:
    """Build the reporter for the configured sink."""
    if cfg.sink == "jsonl":
        return JsonlReporter(cfg.jsonl_path)
    if cfg.sink == "log":
        return LoggingReporter()
    raise ValueError(f"Unknown reporting sink '{cfg.sink}' (expected one of: log, jsonl)")


__all__ = [
    "ResultReporter",
    "LoggingReporter",
    "JsonlReporter",
    "AsyncReporter",
    "create_reporter",
]
