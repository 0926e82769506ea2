"""openide configuration.

Settings come from ``OPENIDE_``-prefixed environment variables or a ``.env``
file, falling back to the defaults below.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RELOAD_MARKERS = ("auto-reload", "hot-reload", "extension")

DEFAULT_ALLOWED_MODULES = (
    "collections",
    "datetime",
    "functools",
    "itertools",
    "json",
    "math",
    "random",
    "re",
    "string",
    "textwrap",
)


class IDESettings(BaseSettings):
    """Runtime settings for an IDE session."""

    model_config = SettingsConfigDict(
        env_prefix="OPENIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace_root: Path = Field(
        default_factory=lambda: Path("~/.openide/workspace").expanduser(),
        description="Directory backing the virtual workspace",
    )
    reload_markers: tuple[str, ...] = Field(
        default=DEFAULT_RELOAD_MARKERS,
        description="Filename substrings that mark a script for hot reload",
    )
    output_limit: int = Field(
        default=10000,
        gt=0,
        description="Maximum characters a single execution may print",
    )
    allowed_modules: tuple[str, ...] = Field(
        default=DEFAULT_ALLOWED_MODULES,
        description="Modules scripts may import",
    )
    seed_workspace: bool = Field(
        default=True,
        description="Write starter files when the workspace root is created",
    )
    log_level: str = Field(default="INFO", description="Level for the openide logger")
