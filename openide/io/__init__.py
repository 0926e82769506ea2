"""Structured logging with tag-based routing."""

from openide.io.filters import TagFilter
from openide.io.formatters import RichFormatter, StatusFormatter
from openide.io.handlers import DisplayHandler, StatusHandler
from openide.io.setup import setup_logging
from openide.io.tags import SCRIPT_TAGS, STATUS_TAGS, TAGS

__all__ = [
    "TAGS",
    "SCRIPT_TAGS",
    "STATUS_TAGS",
    "TagFilter",
    "RichFormatter",
    "StatusFormatter",
    "DisplayHandler",
    "StatusHandler",
    "setup_logging",
]
