"""Core components: workspace, tabs, plugins, sandboxed execution and hot reload."""

from openide.core.events import EventEmitter
from openide.core.executor import ExecutionSandbox, OutputSink, compile_script
from openide.core.models import (
    ChangeEvent,
    EditorTab,
    ExecutionRecord,
    FileNode,
    NodeKind,
    Plugin,
    ReloadReport,
    ReloadStep,
    SessionSnapshot,
)
from openide.core.namespace import build_namespace, safe_builtins
from openide.core.registry import ExtensionRegistry
from openide.core.reload import HotReloadCoordinator, find_reload_scripts
from openide.core.surface import SURFACE_VERSION, CapabilitySurface, build_surface
from openide.core.tabs import TabSession
from openide.core.workspace import WorkspaceStore

__all__ = [
    "CapabilitySurface",
    "ChangeEvent",
    "EditorTab",
    "EventEmitter",
    "ExecutionRecord",
    "ExecutionSandbox",
    "ExtensionRegistry",
    "FileNode",
    "HotReloadCoordinator",
    "NodeKind",
    "OutputSink",
    "Plugin",
    "ReloadReport",
    "ReloadStep",
    "SURFACE_VERSION",
    "SessionSnapshot",
    "TabSession",
    "WorkspaceStore",
    "build_namespace",
    "build_surface",
    "compile_script",
    "find_reload_scripts",
    "safe_builtins",
]
