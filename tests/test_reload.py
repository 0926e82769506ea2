"""Tests for the hot reload cycle."""

import asyncio
import shutil

import pytest

from openide.core.models import FileNode, NodeKind, ReloadReport
from openide.core.reload import HotReloadCoordinator, find_reload_scripts, is_reload_script
from openide.errors import ReloadInProgressError


@pytest.mark.asyncio
async def test_reload_saves_dirty_tabs_and_runs_marked_scripts(session):
    await session.start()
    await session.workspace.create_file("notes.txt", "draft")
    await session.workspace.create_file("hot-reload-init.py", "console.log('reloaded')")
    tab = await session.tabs.open_file("notes.txt")
    session.tabs.update_content(tab.id, "final")

    report = await session.hot_reload()

    assert report.ok
    assert [s.name for s in report.steps] == ["save", "refresh", "scan"]
    assert [r.output for r in report.records] == ["reloaded"]
    assert not any(t.is_dirty for t in session.tabs.tabs)
    assert await session.workspace.read_file("notes.txt") == "final"
    assert report.finished_at is not None


@pytest.mark.asyncio
async def test_marked_scripts_run_in_tree_order(session):
    await session.start()
    for path in ("z-auto-reload.py", "a-extension.py", "lib/extension.py", "plain.py"):
        await session.workspace.create_file(path, f"console.log({path!r})")

    report = await session.hot_reload()

    assert [r.origin for r in report.records] == ["lib/extension.py", "a-extension.py", "z-auto-reload.py"]


@pytest.mark.asyncio
async def test_failing_script_does_not_stop_the_rest(session):
    await session.start()
    await session.workspace.create_file("a-extension.py", "raise ValueError('broken')")
    await session.workspace.create_file("b-extension.py", "console.log('still ran')")

    report = await session.hot_reload()

    assert not report.ok
    assert [r.ok for r in report.records] == [False, True]
    assert report.records[0].error == "broken"
    assert report.records[1].output == "still ran"


@pytest.mark.asyncio
async def test_unreadable_script_is_reported_not_executed(session, root):
    await session.start()
    (root / "bad-extension.py").write_bytes(b"\xff\xfe\xfa")
    await session.workspace.create_file("good-extension.py", "console.log('ok')")

    report = await session.hot_reload()

    assert [r.origin for r in report.records] == ["bad-extension.py", "good-extension.py"]
    assert report.records[0].error_type == "StorageError"
    assert [r.origin for r in session.history] == ["good-extension.py"]


@pytest.mark.asyncio
async def test_refresh_failure_skips_scan(session, root):
    await session.start()
    shutil.rmtree(root)

    report = await session.hot_reload()

    assert not report.ok
    assert [(s.name, s.ok) for s in report.steps] == [("save", True), ("refresh", False), ("scan", False)]
    assert report.records == []


@pytest.mark.asyncio
async def test_concurrent_reload_is_rejected(session):
    await session.start()
    await session.workspace.create_file("slow-extension.py", "await sleep(0.1)")

    first = asyncio.ensure_future(session.coordinator.hot_reload())
    await asyncio.sleep(0.02)
    assert session.coordinator.running

    with pytest.raises(ReloadInProgressError, match="reload in progress"):
        await session.coordinator.hot_reload()
    rejected = await session.hot_reload()
    assert rejected.rejected
    assert not rejected.ok
    assert rejected.summary() == "reload rejected: reload in progress"

    report = await first
    assert report.ok


@pytest.mark.asyncio
async def test_reload_from_inside_a_marked_script_is_rejected(session):
    await session.start()
    await session.workspace.create_file("loop-extension.py", "await api.hot_reload()")

    report = await session.hot_reload()

    assert report.records[0].error_type == "ReloadInProgressError"
    assert report.records[0].error == "reload in progress"


@pytest.mark.asyncio
async def test_reload_triggered_from_script(session):
    await session.start()
    await session.workspace.create_file("x-extension.py", "console.log('marked')")

    record = await session.execute("report = await api.hot_reload()\nreport.ok")

    assert record.output == "True"
    assert [r.origin for r in session.history] == ["x-extension.py", "<input>"]


@pytest.mark.asyncio
async def test_coordinator_with_custom_markers(workspace, tabs):
    from openide.core.executor import ExecutionSandbox

    await workspace.create_file("boot.py", "console.log('boot')")
    await workspace.create_file("extension.py", "console.log('ext')")
    coordinator = HotReloadCoordinator(workspace, tabs, ExecutionSandbox(), markers=("boot",))

    report = await coordinator.hot_reload()

    assert [r.output for r in report.records] == ["boot"]


def test_is_reload_script_is_case_sensitive_substring():
    markers = ("hot-reload",)
    assert is_reload_script("my-hot-reload.txt", markers)
    assert not is_reload_script("Hot-Reload.py", markers)


def test_find_reload_scripts_walks_nested_dirs():
    tree = FileNode(
        name="ws",
        path="",
        kind=NodeKind.DIRECTORY,
        children=[
            FileNode(
                name="sub",
                path="sub",
                kind=NodeKind.DIRECTORY,
                children=[FileNode(name="extension.py", path="sub/extension.py", kind=NodeKind.FILE)],
            ),
            FileNode(name="extension-dir", path="extension-dir", kind=NodeKind.DIRECTORY),
            FileNode(name="main.py", path="main.py", kind=NodeKind.FILE),
        ],
    )
    assert find_reload_scripts(tree, ("extension",)) == ["sub/extension.py"]


def test_report_summary_lists_steps():
    report = ReloadReport()
    report.step("save")
    report.step("refresh", ok=False, detail="disk gone")
    assert report.summary() == "ok save\nFAILED refresh: disk gone"
    assert not report.ok
