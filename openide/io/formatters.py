"""Logging formatters for different output targets."""

import logging


class RichFormatter(logging.Formatter):
    """Formats log messages with Rich markup based on tag."""

    def format(self, record: logging.LogRecord) -> str:
        content = record.getMessage()

        match getattr(record, "tag", None):
            case "script-out":
                return content
            case "script-err":
                return f"[bold red]{content}[/]"
            case "file":
                return f"[dim]file:[/] {content}"
            case "tab":
                return f"[dim]tab:[/] {content}"
            case "plugin":
                return f"[magenta]plugin:[/] {content}"
            case "reload":
                return f"[bold yellow]reload:[/] {content}"
            case _:
                return content


class StatusFormatter(logging.Formatter):
    """Plain ``[tag] LEVEL message`` line for status panes."""

    def format(self, record: logging.LogRecord) -> str:
        tag = getattr(record, "tag", "-")
        level = "" if record.levelno <= logging.INFO else f"{record.levelname} "
        return f"[{tag}] {level}{record.getMessage()}"
