"""Virtual file workspace backed by one directory on disk."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath

from openide.core.events import EventEmitter
from openide.core.models import FileNode, NodeKind
from openide.errors import InvalidPathError, NotFoundError, StorageError

log = logging.getLogger("openide.workspace")


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


_UMASK = _current_umask()

STARTER_FILES: dict[str, str] = {
    "welcome.py": '''# Welcome to Open-IDE!
# This is your starting point for customization.

print("Welcome to Open-IDE!")


def custom_function():
    return "Hello from custom code!"


# Run this file to see the output
custom_function()
''',
    "app-extensions.py": '''# App extensions: runtime modifications.
# Files whose name contains "extension", "auto-reload" or "hot-reload"
# run again on every hot reload.

console.log("App extensions loaded!")


def uppercase(content):
    return content.upper()


api.register_plugin("uppercase", {"run": uppercase})
console.log("Added uppercase plugin")
''',
    "tutorial.md": """# Open-IDE runtime modification tutorial

## Getting started

- `app-extensions.py` is your main customization file, run on every hot reload
- `welcome.py` is an example to get you started
- Any `.py` file you create can be executed against the `api` object

## The `api` object

- `await api.create_file(path, content)`, `await api.read_file(path)`,
  `await api.write_file(path, content)`, `await api.delete_file(path)`
- `await api.list_files()` returns the workspace tree
- `await api.execute(code)` runs more code, `await api.hot_reload()` reloads
- `api.register_plugin(name, plugin)`, `api.get_plugin(name)`, `api.list_plugins()`

## Hot reload

1. Edit and save your files
2. Trigger a reload
3. Every marked script runs again
""",
}


class WorkspaceStore:
    """Owns the workspace directory and a cached snapshot of its tree.

    All paths are workspace-relative and '/'-separated. Every mutation rebuilds
    the tree from disk so the snapshot always reflects durable storage.
    """

    def __init__(self, root: Path | str, events: EventEmitter | None = None):
        self.root = Path(root).expanduser().resolve()
        self.events = events
        self._tree: FileNode | None = None

    def resolve(self, path: str) -> Path:
        """Map a workspace-relative path onto the backing directory."""
        pure = PurePosixPath(path.replace("\\", "/"))
        if pure.is_absolute() or ".." in pure.parts:
            raise InvalidPathError(path)
        parts = [p for p in pure.parts if p not in ("", ".")]
        if not parts:
            raise InvalidPathError(path)
        return self.root.joinpath(*parts)

    def relative(self, full: Path) -> str:
        return full.relative_to(self.root).as_posix()

    @property
    def tree(self) -> FileNode | None:
        """Copy of the cached tree, or None before the first build."""
        return self._tree.model_copy(deep=True) if self._tree is not None else None

    async def initialize(self, seed: bool = True) -> None:
        """Create the workspace root, writing starter files into a new root."""
        created = not self.root.exists()
        try:
            await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(str(self.root), e.strerror or str(e)) from e
        if created and seed:
            for name, content in STARTER_FILES.items():
                await asyncio.to_thread(self._write_atomic, self.resolve(name), content)
            log.info("seeded %d starter files", len(STARTER_FILES), extra={"tag": "file"})
        await self.refresh()

    async def create_file(self, path: str, content: str = "") -> None:
        full = self.resolve(path)
        try:
            await asyncio.to_thread(full.parent.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(path, f"cannot create parent directory: {e.strerror or e}") from e
        await self._write(path, full, content)
        log.info("created %s", path, extra={"tag": "file"})
        await self.refresh()

    async def read_file(self, path: str) -> str:
        full = self.resolve(path)
        try:
            return await asyncio.to_thread(full.read_text, encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(path, str(e)) from e

    async def write_file(self, path: str, content: str) -> None:
        """Replace a file's content atomically."""
        full = self.resolve(path)
        existed = full.exists()
        await self._write(path, full, content)
        log.info("saved %s", path, extra={"tag": "file"})
        if not existed:
            await self.refresh()

    async def delete_file(self, path: str) -> None:
        """Remove a file or directory. Missing paths are ignored."""
        full = self.resolve(path)
        if not full.exists() and not full.is_symlink():
            return
        try:
            if full.is_dir() and not full.is_symlink():
                await asyncio.to_thread(shutil.rmtree, full)
            else:
                await asyncio.to_thread(full.unlink)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(path, e.strerror or str(e)) from e
        log.info("deleted %s", path, extra={"tag": "file"})
        await self.refresh()

    async def list_tree(self) -> FileNode:
        if self._tree is None:
            await self.refresh()
        return self._tree.model_copy(deep=True)

    async def refresh(self) -> FileNode:
        """Discard the cached tree and rebuild it from disk."""
        self._tree = None
        try:
            tree = await asyncio.to_thread(self._build_tree)
        except OSError as e:
            raise StorageError("", f"cannot list workspace: {e.strerror or e}") from e
        self._tree = tree
        if self.events is not None:
            self.events.emit("tree")
        return tree.model_copy(deep=True)

    async def _write(self, path: str, full: Path, content: str) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, full, content)
        except OSError as e:
            raise StorageError(path, e.strerror or str(e)) from e

    @staticmethod
    def _write_atomic(full: Path, content: str) -> None:
        fd, tmp = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # mkstemp creates 0600 files; keep the mode of the file being replaced
            try:
                shutil.copymode(full, tmp)
            except FileNotFoundError:
                os.chmod(tmp, 0o666 & ~_UMASK)
            os.replace(tmp, full)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _build_tree(self) -> FileNode:
        root = FileNode(name=self.root.name, path="", kind=NodeKind.DIRECTORY)
        st = self.root.stat()
        root.children = self._build_children(self.root, "", {(st.st_dev, st.st_ino)})
        return root

    def _build_children(self, folder: Path, prefix: str, seen: set[tuple[int, int]]) -> list[FileNode]:
        nodes = []
        with os.scandir(folder) as entries:
            for entry in entries:
                path = f"{prefix}{entry.name}"
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                if not is_dir:
                    nodes.append(FileNode(name=entry.name, path=path, kind=NodeKind.FILE))
                    continue

                node = FileNode(name=entry.name, path=path, kind=NodeKind.DIRECTORY)
                st = entry.stat()
                key = (st.st_dev, st.st_ino)
                # A symlink back to an ancestor is listed but not descended
                if key not in seen:
                    node.children = self._build_children(Path(entry.path), path + "/", seen | {key})
                nodes.append(node)

        nodes.sort(key=lambda n: (not n.is_dir, n.name))
        return nodes
