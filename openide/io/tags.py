"""Tag constants for log record routing."""

from typing import Literal

Tag = Literal[
    "file",
    "tab",
    "plugin",
    "script-out",
    "script-err",
    "reload",
]

TAGS: set[str] = {
    "file",
    "tab",
    "plugin",
    "script-out",
    "script-err",
    "reload",
}

SCRIPT_TAGS: set[str] = {"script-out", "script-err"}

STATUS_TAGS: set[str] = TAGS - SCRIPT_TAGS
