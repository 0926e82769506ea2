"""IDESession: one workspace, its tabs, plugins, sandbox and reload cycle."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from openide.config import IDESettings
from openide.core.events import EventEmitter, Listener
from openide.core.executor import ExecutionSandbox
from openide.core.models import ChangeEvent, EditorTab, ExecutionRecord, ReloadReport, SessionSnapshot
from openide.core.registry import ExtensionRegistry
from openide.core.reload import HotReloadCoordinator
from openide.core.surface import CapabilitySurface, build_surface
from openide.core.tabs import TabSession
from openide.core.workspace import WorkspaceStore
from openide.errors import ReloadInProgressError

NEW_FILE_TEMPLATE = """# New Python file
# Write your code here and execute it!

print("Hello from {name}!")

# The api object is your handle on the IDE
print("Available API:", ", ".join(api))
"""


class IDESession:
    """Wires the core components together and is what a front end talks to.

    Every method returns plain snapshots; failures end up in the execution
    history or in a reload report rather than escaping to the caller.
    """

    def __init__(self, settings: IDESettings | None = None, root: Path | str | None = None):
        self.id = uuid4().hex[:8]
        self.settings = settings or IDESettings()
        if root is not None:
            self.settings = self.settings.model_copy(update={"workspace_root": Path(root)})

        self.log = logging.getLogger(f"openide.session.{self.id}")
        self.events = EventEmitter()
        self.workspace = WorkspaceStore(self.settings.workspace_root, self.events)
        self.tabs = TabSession(self.workspace, self.events)
        self.registry = ExtensionRegistry(self._current_surface, self.events)
        self.sandbox = ExecutionSandbox(
            self._current_surface,
            output_limit=self.settings.output_limit,
            allowed_modules=self.settings.allowed_modules,
            events=self.events,
        )
        self.coordinator = HotReloadCoordinator(
            self.workspace, self.tabs, self.sandbox, markers=self.settings.reload_markers
        )
        self.surface = self._build_surface(0)
        self.events.on_change(self._on_change)

    async def start(self) -> list[ExecutionRecord]:
        """Prepare the workspace and run the marked extension scripts once."""
        await self.workspace.initialize(seed=self.settings.seed_workspace)
        self.log.info("workspace ready at %s", self.workspace.root, extra={"tag": "file"})
        return await self.coordinator.load_extensions()

    def on_change(self, listener: Listener):
        return self.events.on_change(listener)

    @property
    def history(self) -> list[ExecutionRecord]:
        return self.sandbox.history

    def clear_history(self) -> None:
        self.sandbox.clear_history()

    async def execute(self, source: str, origin: str = "<input>") -> ExecutionRecord:
        return await self.sandbox.execute(source, origin=origin)

    async def run_file(self, path: str) -> ExecutionRecord:
        return await self.sandbox.execute_file(self.workspace, path)

    async def run_active_tab(self) -> ExecutionRecord:
        """Execute the active tab's buffered content, saved or not."""
        tab = self.tabs.active_tab
        if tab is None:
            return await self.sandbox.execute('print("No file selected. Open a file to execute code.")')
        return await self.sandbox.execute(tab.content, origin=tab.path)

    async def new_file(self) -> EditorTab:
        name = f"new-file-{datetime.now():%Y%m%d-%H%M%S-%f}.py"
        await self.workspace.create_file(name, NEW_FILE_TEMPLATE.format(name=name))
        return await self.tabs.open_file(name)

    async def hot_reload(self) -> ReloadReport:
        try:
            return await self.coordinator.hot_reload()
        except ReloadInProgressError:
            return ReloadReport(rejected=True, finished_at=datetime.now())

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(tree=self.workspace.tree, tabs=self.tabs.tabs, history=self.history)

    def _current_surface(self) -> CapabilitySurface:
        return self.surface

    def _build_surface(self, generation: int) -> CapabilitySurface:
        return build_surface(self.workspace, self.tabs, self.registry, self.sandbox, self.coordinator, generation)

    def _on_change(self, event: ChangeEvent) -> None:
        if event.kind in ("tree", "tabs"):
            self.surface = self._build_surface(self.surface.generation + 1)
