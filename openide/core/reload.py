"""Hot reload: save dirty tabs, reindex the workspace, re-run marked scripts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime

from openide.config import DEFAULT_RELOAD_MARKERS
from openide.core.executor import ExecutionSandbox
from openide.core.models import ExecutionRecord, FileNode, ReloadReport
from openide.core.tabs import TabSession
from openide.core.workspace import WorkspaceStore
from openide.errors import ReloadInProgressError, WorkspaceError

log = logging.getLogger("openide.reload")


def is_reload_script(name: str, markers: Iterable[str]) -> bool:
    return any(marker in name for marker in markers)


def find_reload_scripts(tree: FileNode, markers: Iterable[str]) -> list[str]:
    """Paths of marked files, in tree order."""
    markers = tuple(markers)
    return [node.path for node in tree.iter_files() if is_reload_script(node.name, markers)]


class HotReloadCoordinator:
    """Runs the reload sequence. Only one reload may run at a time."""

    def __init__(
        self,
        workspace: WorkspaceStore,
        tabs: TabSession,
        sandbox: ExecutionSandbox,
        markers: Iterable[str] = DEFAULT_RELOAD_MARKERS,
    ):
        self.workspace = workspace
        self.tabs = tabs
        self.sandbox = sandbox
        self.markers = tuple(markers)
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def hot_reload(self) -> ReloadReport:
        """Run one reload cycle.

        Raises:
            ReloadInProgressError: If another reload has not finished.
        """
        if self._lock.locked():
            log.warning("rejected: reload in progress", extra={"tag": "reload"})
            raise ReloadInProgressError()

        async with self._lock:
            report = ReloadReport()
            log.info("started", extra={"tag": "reload"})

            try:
                failures = await self.tabs.save_all()
            except Exception as e:
                report.step("save", ok=False, detail=str(e))
            else:
                detail = "; ".join(f"{path}: {err}" for path, err in failures.items())
                report.step("save", ok=not failures, detail=detail)

            try:
                tree = await self.workspace.refresh()
            except WorkspaceError as e:
                report.step("refresh", ok=False, detail=str(e))
                report.step("scan", ok=False, detail="skipped: tree unavailable")
                return self._finish(report)
            report.step("refresh")

            paths = find_reload_scripts(tree, self.markers)
            report.step("scan", detail=", ".join(paths))
            report.records.extend(await self._run_scripts(paths))

            return self._finish(report)

    async def load_extensions(self) -> list[ExecutionRecord]:
        """Run every marked script once against the current tree, without saving.

        Raises:
            ReloadInProgressError: If a reload has not finished.
        """
        if self._lock.locked():
            raise ReloadInProgressError()

        async with self._lock:
            paths = find_reload_scripts(await self.workspace.list_tree(), self.markers)
            records = await self._run_scripts(paths)
            log.info("loaded %d extension script(s)", len(records), extra={"tag": "reload"})
            return records

    async def _run_scripts(self, paths: list[str]) -> list[ExecutionRecord]:
        return [await self._run_script(path) for path in paths]

    async def _run_script(self, path: str) -> ExecutionRecord:
        try:
            source = await self.workspace.read_file(path)
        except WorkspaceError as e:
            log.warning("cannot read %s: %s", path, e, extra={"tag": "reload"})
            return ExecutionRecord(
                output=f"Failed to read {path}: {e}",
                error=str(e),
                error_type=type(e).__name__,
                origin=path,
            )
        record = await self.sandbox.execute(source, origin=path)
        if not record.ok:
            log.warning("%s failed: %s", path, record.error, extra={"tag": "reload"})
        return record

    def _finish(self, report: ReloadReport) -> ReloadReport:
        report.finished_at = datetime.now()
        for step in report.steps:
            if not step.ok:
                log.warning("%s failed: %s", step.name, step.detail, extra={"tag": "reload"})
        log.info("finished, %d script(s) run", len(report.records), extra={"tag": "reload"})
        return report
