"""Reporter back ends for task progress, status lines and summaries."""

from .base import (
    STAT_KEYS,
    Reporter,
    TaskRecord,
    TaskStatus,
    format_stats,
    get_reporter,
    get_verbosity,
    section,
    set_reporter,
    set_verbosity,
    task,
)
from .plain import PlainReporter
from .jsonl import JsonLinesReporter
from .silent import SilentReporter
from .rich_reporter import RichReporter

__all__ = [
    "STAT_KEYS",
    "Reporter",
    "TaskRecord",
    "TaskStatus",
    "format_stats",
    "get_reporter",
    "set_reporter",
    "section",
    "task",
    "set_verbosity",
    "get_verbosity",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
]
