"""Data model for the workspace, editor, sandbox and reload cycle."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class FileNode(BaseModel):
    """One entry of the workspace tree. The root has an empty path."""

    name: str
    path: str
    kind: NodeKind
    children: list[FileNode] = Field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    def iter_files(self) -> Iterator[FileNode]:
        """Yield file nodes depth-first, in tree order."""
        for child in self.children:
            if child.is_dir:
                yield from child.iter_files()
            else:
                yield child

    def find(self, path: str) -> FileNode | None:
        if self.path == path:
            return self
        for child in self.children:
            if child.path == path or (child.is_dir and path.startswith(child.path + "/")):
                return child.find(path)
        return None


class EditorTab(BaseModel):
    """An open file with a buffered, possibly unsaved copy of its content."""

    id: str
    name: str
    path: str
    content: str = ""
    is_dirty: bool = False
    is_active: bool = False


class ExecutionRecord(BaseModel):
    """Result of one sandboxed execution."""

    output: str
    error: str | None = None
    error_type: str | None = None
    origin: str = "<script>"
    timestamp: datetime = Field(default_factory=datetime.now)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class Plugin(BaseModel):
    """A named capability extension registered by a script."""

    name: str
    init_hook: Callable[..., Any] | None = None
    methods: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    target: Any = None

    def call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        try:
            func = self.methods[method]
        except KeyError:
            raise AttributeError(f"plugin '{self.name}' has no method '{method}'") from None
        return func(*args, **kwargs)

    @classmethod
    def coerce(cls, name: str, obj: Any) -> Plugin:
        """Build a Plugin from a Plugin, a mapping, or an arbitrary object.

        Mappings use an ``init`` (or ``init_hook``) key for the hook and keep
        their other callable values as methods. Objects contribute their
        ``init`` attribute and public callables.
        """
        if isinstance(obj, Plugin):
            return obj.model_copy(update={"name": name})

        hook_keys = ("init_hook", "init")
        if isinstance(obj, Mapping):
            hook = next((obj[k] for k in hook_keys if callable(obj.get(k))), None)
            methods = {k: v for k, v in obj.items() if callable(v) and k not in hook_keys}
            return cls(name=name, init_hook=hook, methods=methods, target=obj)

        hook = getattr(obj, "init", None)
        methods = {}
        for attr in dir(obj):
            if attr.startswith("_") or attr in hook_keys:
                continue
            value = getattr(obj, attr)
            if callable(value):
                methods[attr] = value
        return cls(name=name, init_hook=hook if callable(hook) else None, methods=methods, target=obj)


class ReloadStep(BaseModel):
    name: str
    ok: bool = True
    detail: str = ""


class ReloadReport(BaseModel):
    """Outcome of one hot reload cycle."""

    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None
    steps: list[ReloadStep] = Field(default_factory=list)
    records: list[ExecutionRecord] = Field(default_factory=list)
    rejected: bool = False

    @property
    def ok(self) -> bool:
        if self.rejected:
            return False
        return all(s.ok for s in self.steps) and all(r.ok for r in self.records)

    def step(self, name: str, ok: bool = True, detail: str = "") -> ReloadStep:
        entry = ReloadStep(name=name, ok=ok, detail=detail)
        self.steps.append(entry)
        return entry

    def summary(self) -> str:
        if self.rejected:
            return "reload rejected: reload in progress"
        lines = [f"{'ok' if s.ok else 'FAILED'} {s.name}: {s.detail}".rstrip(": ") for s in self.steps]
        return "\n".join(lines)


ChangeKind = Literal["tree", "tabs", "history", "plugins"]


class ChangeEvent(BaseModel):
    kind: ChangeKind
    detail: str = ""


class SessionSnapshot(BaseModel):
    """Everything a front end needs to re-render after a core call."""

    tree: FileNode | None
    tabs: list[EditorTab]
    history: list[ExecutionRecord]
