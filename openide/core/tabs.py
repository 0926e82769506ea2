"""Editor tabs: buffered views of workspace files."""

from __future__ import annotations

import asyncio
import itertools
import logging
from uuid import uuid4

from openide.core.events import EventEmitter
from openide.core.models import EditorTab
from openide.core.workspace import WorkspaceStore

log = logging.getLogger("openide.tabs")


class TabSession:
    """The open tabs of one session and which of them is active.

    Tab content belongs to the session; the workspace only sees it on save.
    """

    def __init__(self, workspace: WorkspaceStore, events: EventEmitter | None = None):
        self.workspace = workspace
        self.events = events
        self._tabs: list[EditorTab] = []
        self._active_id: str | None = None
        self._counter = itertools.count(1)

    @property
    def tabs(self) -> list[EditorTab]:
        return [tab.model_copy() for tab in self._tabs]

    @property
    def active_tab(self) -> EditorTab | None:
        tab = self._find(self._active_id)
        return tab.model_copy() if tab else None

    def get(self, tab_id: str) -> EditorTab | None:
        tab = self._find(tab_id)
        return tab.model_copy() if tab else None

    def find_by_path(self, path: str) -> EditorTab | None:
        tab = next((t for t in self._tabs if t.path == path), None)
        return tab.model_copy() if tab else None

    async def open_file(self, path: str) -> EditorTab:
        """Open a file in a new tab, or activate its existing tab."""
        existing = next((t for t in self._tabs if t.path == path), None)
        if existing is None:
            content = await self.workspace.read_file(path)
            # Another open of the same path may have finished while we read
            existing = next((t for t in self._tabs if t.path == path), None)
        if existing is not None:
            self.set_active_tab(existing.id)
            return existing.model_copy()

        tab = EditorTab(
            id=f"tab-{next(self._counter)}-{uuid4().hex[:6]}",
            name=path.rsplit("/", 1)[-1],
            path=path,
            content=content,
        )
        self._tabs.append(tab)
        self._activate(tab.id)
        log.info("opened %s", path, extra={"tag": "tab"})
        return tab.model_copy()

    def set_active_tab(self, tab_id: str) -> None:
        if self._find(tab_id) is None:
            return
        self._activate(tab_id)

    def update_content(self, tab_id: str, content: str) -> None:
        tab = self._find(tab_id)
        if tab is None:
            return
        tab.content = content
        tab.is_dirty = True
        self._changed()

    async def save_tab(self, tab_id: str) -> bool:
        """Persist a dirty tab. Returns True if anything was written."""
        tab = self._find(tab_id)
        if tab is None or not tab.is_dirty:
            return False
        content = tab.content
        await self.workspace.write_file(tab.path, content)
        # Edits made during the write keep the tab dirty
        if tab.content == content:
            tab.is_dirty = False
        self._changed()
        return True

    async def close_tab(self, tab_id: str) -> None:
        tab = self._find(tab_id)
        if tab is None:
            return
        if tab.is_dirty:
            try:
                await self.save_tab(tab_id)
            except Exception as e:
                log.warning("closing %s without saving: %s", tab.path, e, extra={"tag": "tab"})

        # The tab may have been closed while saving
        if tab not in self._tabs:
            return
        index = self._tabs.index(tab)
        self._tabs.pop(index)
        if self._active_id == tab_id:
            if self._tabs:
                self._activate(self._tabs[min(index, len(self._tabs) - 1)].id)
            else:
                self._active_id = None
        log.info("closed %s", tab.path, extra={"tag": "tab"})
        self._changed()

    async def save_all(self) -> dict[str, str]:
        """Save every dirty tab concurrently. Returns {path: error} for failures."""
        dirty = [t for t in self._tabs if t.is_dirty]
        results = await asyncio.gather(*(self.save_tab(t.id) for t in dirty), return_exceptions=True)
        failures = {}
        for tab, result in zip(dirty, results):
            if isinstance(result, Exception):
                failures[tab.path] = str(result)
                log.warning("failed to save %s: %s", tab.path, result, extra={"tag": "tab"})
            elif isinstance(result, BaseException):
                raise result
        return failures

    def _find(self, tab_id: str | None) -> EditorTab | None:
        if tab_id is None:
            return None
        return next((t for t in self._tabs if t.id == tab_id), None)

    def _activate(self, tab_id: str) -> None:
        for tab in self._tabs:
            tab.is_active = tab.id == tab_id
        self._active_id = tab_id
        self._changed()

    def _changed(self) -> None:
        if self.events is not None:
            self.events.emit("tabs")
