"""Logger setup and wiring."""

from __future__ import annotations

import logging

from rich.console import Console

from openide.io.filters import TagFilter
from openide.io.handlers import DisplayHandler, StatusHandler
from openide.io.tags import SCRIPT_TAGS, STATUS_TAGS
from openide.ui.console import console as default_console


def setup_logging(console: Console | None = None, level: int | str = logging.INFO) -> tuple[logging.Logger, StatusHandler]:
    """Configure the openide logger with display and status handlers."""
    if console is None:
        console = default_console

    log = logging.getLogger("openide")
    log.setLevel(level)
    for handler in list(log.handlers):
        if isinstance(handler, DisplayHandler | StatusHandler):
            log.removeHandler(handler)

    # Status handler: save/reload/plugin lines, never script output
    status = StatusHandler()
    status.addFilter(TagFilter(STATUS_TAGS))
    log.addHandler(status)

    # Display handler: everything tagged except script output
    display = DisplayHandler(console)
    display.addFilter(TagFilter(SCRIPT_TAGS, exclude=True))
    log.addHandler(display)

    return log, status
