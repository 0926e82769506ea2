"""UI components: console utilities and panels."""

from openide.ui.console import THEME, console, format_elapsed
from openide.ui.panels import (
    build_tree,
    print_banner,
    print_record_panel,
    print_reload_report,
    print_tabs,
    print_tree,
)

__all__ = [
    "console",
    "THEME",
    "format_elapsed",
    "build_tree",
    "print_banner",
    "print_record_panel",
    "print_reload_report",
    "print_tabs",
    "print_tree",
]
