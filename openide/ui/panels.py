"""Panel rendering for execution records, the file tree and open tabs."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from openide.core.models import EditorTab, ExecutionRecord, FileNode, ReloadReport
from openide.ui.console import console as default_console
from openide.ui.console import format_elapsed


def print_record_panel(record: ExecutionRecord, console: Console | None = None) -> None:
    """Print one execution record in a panel.

    Args:
        record: The record to display.
        console: Console to use. Defaults to global console.
    """
    if console is None:
        console = default_console

    style = "green" if record.ok else "red"
    title = escape(record.origin) if record.ok else f"{escape(record.origin)} ({record.error_type})"
    console.print(Panel(
        Text(record.output),
        title=f"[bold {style}]{title}[/]",
        subtitle=f"[dim]{record.timestamp:%H:%M:%S} · {format_elapsed(record.duration)}[/]",
        border_style=style,
    ))


def build_tree(node: FileNode) -> Tree:
    """Convert a FileNode tree into a rich Tree."""
    tree = Tree(f"[bold]{escape(node.name) or '/'}[/]")
    _add_children(tree, node)
    return tree


def _add_children(branch: Tree, node: FileNode) -> None:
    for child in node.children:
        if child.is_dir:
            _add_children(branch.add(f"[ide.dir]{escape(child.name)}/[/]"), child)
        else:
            branch.add(escape(child.name))


def print_tree(node: FileNode, console: Console | None = None) -> None:
    if console is None:
        console = default_console
    console.print(build_tree(node))


def print_tabs(tabs: list[EditorTab], console: Console | None = None) -> None:
    """Print open tabs as a table, marking the active and unsaved ones."""
    if console is None:
        console = default_console

    if not tabs:
        console.print("[dim](no open tabs)[/]")
        return

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("")
    table.add_column("id", style="dim")
    table.add_column("path")
    table.add_column("")
    for tab in tabs:
        table.add_row(
            "[ide.active]▶[/]" if tab.is_active else "",
            tab.id,
            escape(tab.path),
            "[ide.dirty]●[/]" if tab.is_dirty else "",
        )
    console.print(table)


def print_reload_report(report: ReloadReport, console: Console | None = None) -> None:
    if console is None:
        console = default_console

    style = "green" if report.ok else "red"
    console.print(Panel(report.summary() or "(nothing to do)", title=f"[bold {style}]hot reload[/]", border_style=style))
    for record in report.records:
        print_record_panel(record, console=console)


def print_banner(root: str, console: Console | None = None) -> None:
    """Print the welcome banner listing the front end's commands.

    Args:
        root: Workspace root shown in the subtitle.
        console: Console to use. Defaults to global console.
    """
    if console is None:
        console = default_console

    console.print()
    console.print(
        Panel(
            Text.from_markup(
                """[bold cyan]:tree[/]              [dim]→ show the workspace tree[/]
[bold cyan]:tabs[/]              [dim]→ list open tabs[/]
[bold cyan]:open[/][dim] path[/]         [dim]→ open a file in a tab[/]
[bold cyan]:edit[/][dim] id text[/]      [dim]→ replace a tab's buffered content[/]
[bold cyan]:save[/][dim] \\[id][/]         [dim]→ save one tab, or all dirty tabs[/]
[bold cyan]:close[/][dim] id[/]          [dim]→ close a tab (saves first)[/]
[bold cyan]:run[/][dim] \\[path][/]        [dim]→ run a file, or the active tab[/]
[bold cyan]:new[/]               [dim]→ create and open a new file[/]
[bold cyan]:reload[/]            [dim]→ save, reindex, re-run marked scripts[/]
[bold cyan]:history[/]           [dim]→ show execution history[/]
[bold cyan]:clear[/]             [dim]→ clear execution history[/]
[bold cyan]:quit[/]              [dim]→ exit[/]

[dim]Anything else runs as Python with [/][bold yellow]api[/][dim] and [/][bold yellow]console[/][dim] in scope.[/]"""
            ),
            title="[bold white]open-ide[/]",
            subtitle=f"[dim]{root}[/]",
            border_style="cyan",
        )
    )
    console.print()
