"""The capability surface: the fixed API handed to every script as ``api``."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openide.core.executor import ExecutionSandbox
    from openide.core.registry import ExtensionRegistry
    from openide.core.reload import HotReloadCoordinator
    from openide.core.tabs import TabSession
    from openide.core.workspace import WorkspaceStore

SURFACE_VERSION = "1.0"

SURFACE_METHODS = (
    "create_file",
    "read_file",
    "write_file",
    "delete_file",
    "list_files",
    "execute",
    "hot_reload",
    "register_plugin",
    "get_plugin",
    "list_plugins",
    "open_file",
    "list_tabs",
    "save_all",
)


class CapabilitySurface(Mapping[str, Callable[..., Any]]):
    """Immutable name -> implementation mapping, also readable as attributes.

    A new surface is built whenever the session's tree or tabs change; an
    existing one is never modified.
    """

    def __init__(self, methods: Mapping[str, Callable[..., Any]], generation: int = 0):
        object.__setattr__(self, "_methods", MappingProxyType(dict(methods)))
        object.__setattr__(self, "version", SURFACE_VERSION)
        object.__setattr__(self, "generation", generation)

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._methods[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __getattr__(self, name: str) -> Callable[..., Any]:
        try:
            return self._methods[name]
        except KeyError:
            raise AttributeError(f"api has no method '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("the capability surface is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("the capability surface is read-only")

    def __repr__(self) -> str:
        return f"<api v{self.version} gen={self.generation}: {', '.join(self._methods)}>"


def _expose(name: str, func: Callable[..., Any], doc: str) -> Callable[..., Any]:
    # Hides __self__; closure and globals stay private because scripts cannot
    # compile underscore attribute access
    def method(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    method.__name__ = name
    method.__qualname__ = f"api.{name}"
    method.__doc__ = doc
    return method


def build_surface(
    workspace: WorkspaceStore,
    tabs: TabSession,
    registry: ExtensionRegistry,
    sandbox: ExecutionSandbox,
    coordinator: HotReloadCoordinator,
    generation: int = 0,
) -> CapabilitySurface:
    """Bind the surface methods to one session's components."""

    async def execute(code: str) -> Any:
        return await sandbox.execute(code, origin="<api.execute>")

    def list_plugins() -> list[str]:
        return sorted(registry.list())

    def list_tabs() -> list[Any]:
        return tabs.tabs

    impls: dict[str, tuple[Callable[..., Any], str]] = {
        "create_file": (workspace.create_file, "await api.create_file(path, content='')"),
        "read_file": (workspace.read_file, "await api.read_file(path) -> str"),
        "write_file": (workspace.write_file, "await api.write_file(path, content)"),
        "delete_file": (workspace.delete_file, "await api.delete_file(path)"),
        "list_files": (workspace.list_tree, "await api.list_files() -> FileNode"),
        "execute": (execute, "await api.execute(code) -> ExecutionRecord"),
        "hot_reload": (coordinator.hot_reload, "await api.hot_reload() -> ReloadReport"),
        "register_plugin": (registry.register, "api.register_plugin(name, plugin) -> Plugin"),
        "get_plugin": (registry.get, "api.get_plugin(name) -> Plugin | None"),
        "list_plugins": (list_plugins, "api.list_plugins() -> list[str]"),
        "open_file": (tabs.open_file, "await api.open_file(path) -> EditorTab"),
        "list_tabs": (list_tabs, "api.list_tabs() -> list[EditorTab]"),
        "save_all": (tabs.save_all, "await api.save_all() -> {path: error}"),
    }
    methods = {name: _expose(name, *impls[name]) for name in SURFACE_METHODS}
    return CapabilitySurface(methods, generation=generation)
