"""Logging handlers for status and display routing."""

import logging

from rich.console import Console

from openide.io.formatters import RichFormatter, StatusFormatter


class StatusHandler(logging.Handler):
    """Accumulates save/reload status lines for a front end to show."""

    def __init__(self, capacity: int = 500) -> None:
        super().__init__()
        self.capacity = capacity
        self.buffer: list[str] = []
        self.setFormatter(StatusFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        self.buffer.append(self.format(record))
        if len(self.buffer) > self.capacity:
            del self.buffer[: len(self.buffer) - self.capacity]

    def get_status(self) -> str:
        return "\n".join(self.buffer)

    def clear(self) -> None:
        self.buffer.clear()


class DisplayHandler(logging.Handler):
    """Prints formatted records to the terminal. setup_logging filters out script output."""

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console
        self.setFormatter(RichFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        self.console.print(self.format(record))
