"""Shared rich console for the terminal front end."""

from rich.console import Console
from rich.theme import Theme

THEME = Theme({
    "ide.dir": "bold blue",
    "ide.active": "cyan",
    "ide.dirty": "yellow",
})

console = Console(theme=THEME, highlight=False)


def format_elapsed(seconds: float) -> str:
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    if seconds >= 0.001:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds * 1_000_000:.0f}µs"
