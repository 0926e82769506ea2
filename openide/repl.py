"""Terminal front end: a command loop over one IDE session."""

from __future__ import annotations

import asyncio
import sys

from rich.console import Console

from openide.config import IDESettings
from openide.io import setup_logging
from openide.session import IDESession
from openide.ui.console import console as default_console
from openide.ui.panels import print_banner, print_record_panel, print_reload_report, print_tabs, print_tree

COMMANDS = {"tree", "tabs", "open", "edit", "save", "close", "run", "new", "reload", "history", "clear", "quit"}

CYAN = "\001\033[36m\002"
YELLOW = "\001\033[33m\002"
RESET = "\001\033[0m\002"


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split ``:name args`` input into (name, args). Returns None for code.

    ``:edit`` keeps everything after the tab id as one argument.
    """
    text = text.strip()
    if not text.startswith(":") or len(text) == 1:
        return None
    name, _, rest = text[1:].partition(" ")
    if name not in COMMANDS:
        return None
    if name == "edit":
        tab_id, _, content = rest.strip().partition(" ")
        return name, [a for a in (tab_id, content.replace("\\n", "\n")) if a]
    return name, rest.split()


def needs_more(lines: list[str]) -> bool:
    """Whether buffered input is an unfinished block (header or indented body)."""
    if not lines:
        return False
    last = lines[-1]
    if not last.strip():
        return False
    return last.rstrip().endswith((":", "\\")) or (len(lines) > 1 and last[:1].isspace())


def prompt_text(session: IDESession) -> str:
    """Prompt showing the active tab and how many tabs are unsaved."""
    parts = []
    tab = session.tabs.active_tab
    if tab is not None:
        parts.append(f"{CYAN}{tab.name}{RESET}")
    dirty = sum(1 for t in session.tabs.tabs if t.is_dirty)
    if dirty:
        parts.append(f"{YELLOW}{dirty}●{RESET}")
    parts.append("◈ ")
    return " ".join(parts)


async def dispatch(session: IDESession, name: str, args: list[str], console: Console) -> bool:
    """Run one command. Returns False when the loop should stop."""
    match name:
        case "quit":
            return False
        case "tree":
            print_tree(await session.workspace.list_tree(), console=console)
        case "tabs":
            print_tabs(session.tabs.tabs, console=console)
        case "open" if args:
            await session.tabs.open_file(args[0])
            print_tabs(session.tabs.tabs, console=console)
        case "edit" if len(args) == 2:
            session.tabs.update_content(args[0], args[1])
        case "save" if args:
            await session.tabs.save_tab(args[0])
        case "save":
            failures = await session.tabs.save_all()
            for path, error in failures.items():
                console.print(f"[red]not saved[/] {path}: {error}")
        case "close" if args:
            await session.tabs.close_tab(args[0])
        case "run" if args:
            print_record_panel(await session.run_file(args[0]), console=console)
        case "run":
            print_record_panel(await session.run_active_tab(), console=console)
        case "new":
            tab = await session.new_file()
            console.print(f"[dim]created[/] {tab.path}")
        case "reload":
            print_reload_report(await session.hot_reload(), console=console)
        case "history":
            for record in session.history:
                print_record_panel(record, console=console)
        case "clear":
            session.clear_history()
            console.print("[dim]History cleared.[/]")
        case _:
            console.print(f"[yellow]usage:[/] :{name} needs arguments")
    return True


async def run_repl(session: IDESession, console: Console | None = None) -> None:
    """Read commands and code from stdin until :quit or EOF."""
    if console is None:
        console = default_console

    records = await session.start()
    print_banner(str(session.workspace.root), console=console)
    for record in records:
        print_record_panel(record, console=console)

    buffer: list[str] = []
    while True:
        try:
            line = await asyncio.to_thread(input, "⋮ " if buffer else prompt_text(session))
        except EOFError:
            break
        except KeyboardInterrupt:
            console.print("\n[dim]KeyboardInterrupt[/]")
            buffer.clear()
            continue

        if not buffer and (command := parse_command(line)):
            try:
                if not await dispatch(session, *command, console=console):
                    break
            except Exception as e:
                console.print(f"[red]{type(e).__name__}:[/] {e}")
            continue

        buffer.append(line)
        if needs_more(buffer):
            continue
        source = "\n".join(buffer).strip()
        buffer.clear()
        if source:
            print_record_panel(await session.execute(source), console=console)


def main(argv: list[str] | None = None) -> None:
    """Entry point: ``python -m openide [workspace_root]``."""
    argv = sys.argv[1:] if argv is None else argv
    settings = IDESettings()
    setup_logging(level=settings.log_level)
    asyncio.run(run_repl(IDESession(settings, root=argv[0] if argv else None)))
