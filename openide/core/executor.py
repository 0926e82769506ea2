"""Sandboxed script execution with captured output."""

from __future__ import annotations

import ast
import asyncio
import contextvars
import inspect
import logging
import time
from collections.abc import Callable, Iterable
from types import CodeType
from typing import TYPE_CHECKING, Any

from openide.config import DEFAULT_ALLOWED_MODULES
from openide.core.events import EventEmitter
from openide.core.models import ExecutionRecord
from openide.core.namespace import Timers, build_namespace
from openide.errors import ScriptError, WorkspaceError

if TYPE_CHECKING:
    from openide.core.surface import CapabilitySurface
    from openide.core.workspace import WorkspaceStore

log = logging.getLogger("openide.sandbox")

SUCCESS_MARKER = "Code executed successfully"
ERROR_PREFIX = "ERROR: "

# Set while a script runs, so nested executions skip the lock their caller holds
_in_script: contextvars.ContextVar[bool] = contextvars.ContextVar("openide_in_script", default=False)


class OutputSink:
    """Line buffer for one execution, with a size limit.

    After ``close`` further writes (late timer callbacks) only reach the log.
    """

    def __init__(self, limit: int = 10000, origin: str = "<script>"):
        self.limit = limit
        self.origin = origin
        self.lines: list[str] = []
        self.size = 0
        self.closed = False
        self._partial = ""

    def log(self, *args: Any) -> None:
        self._emit(" ".join(str(a) for a in args), "script-out")

    def error(self, *args: Any) -> None:
        self._emit(ERROR_PREFIX + " ".join(str(a) for a in args), "script-err")

    def write(self, text: str, end: str = "\n") -> None:
        """print()-style write: text accumulates until a newline ends the line."""
        self._partial += text + end
        *complete, self._partial = self._partial.split("\n")
        for line in complete:
            self._emit(line, "script-out")

    def close(self) -> None:
        if self.closed:
            return
        if self._partial:
            # A trailing unterminated line is kept even past the limit
            log.debug("%s: %s", self.origin, self._partial, extra={"tag": "script-out"})
            self.lines.append(self._partial)
            self._partial = ""
        self.closed = True

    def getvalue(self) -> str:
        return "\n".join(self.lines)

    def _emit(self, line: str, tag: str) -> None:
        log.debug("%s: %s", self.origin, line, extra={"tag": tag})
        if self.closed:
            return
        self.size += len(line) + 1
        if self.size > self.limit:
            raise RuntimeError(f"Output too large (>{self.limit} chars). Use slicing or summarize.")
        self.lines.append(line)


def _reject_private_attributes(tree: ast.AST, source: str, origin: str) -> None:
    lines = source.splitlines()
    for node in ast.walk(tree):
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            text = lines[node.lineno - 1] if node.lineno <= len(lines) else ""
            raise SyntaxError(
                f"access to private attribute '{node.attr}' is not allowed",
                (origin, node.lineno, node.col_offset + 1, text),
            )


def compile_script(source: str, origin: str = "<script>") -> tuple[CodeType, CodeType | None]:
    """Compile a script with top-level await allowed.

    Attribute names starting with an underscore are rejected, which keeps
    dunder attributes like ``__globals__`` and ``__class__`` out of reach.
    A trailing expression statement is split off and compiled on its own so
    its value can be reported as the script's return value.
    """
    flags = ast.PyCF_ALLOW_TOP_LEVEL_AWAIT
    tree = ast.parse(source, origin, "exec")
    _reject_private_attributes(tree, source, origin)
    tail = None
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        last = tree.body.pop()
        tail = compile(ast.Expression(last.value), origin, "eval", flags=flags)
    body = compile(tree, origin, "exec", flags=flags)
    return body, tail


def _host_cancelled() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


async def _evaluate(code: CodeType, namespace: dict[str, Any]) -> Any:
    result = eval(code, namespace)
    if code.co_flags & inspect.CO_COROUTINE:
        result = await result
    return result


class ExecutionSandbox:
    """Runs scripts against the capability surface and keeps their history.

    Top-level executions are serialized on one lock. Executions started from
    inside a running script (``api.execute``) run within their caller.
    """

    def __init__(
        self,
        surface_provider: Callable[[], CapabilitySurface | None] | None = None,
        output_limit: int = 10000,
        allowed_modules: Iterable[str] = DEFAULT_ALLOWED_MODULES,
        events: EventEmitter | None = None,
    ):
        self.surface_provider = surface_provider
        self.output_limit = output_limit
        self.allowed_modules = tuple(allowed_modules)
        self.events = events
        self._history: list[ExecutionRecord] = []
        self._lock = asyncio.Lock()

    @property
    def history(self) -> list[ExecutionRecord]:
        return list(self._history)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def clear_history(self) -> None:
        self._history.clear()
        if self.events is not None:
            self.events.emit("history", "cleared")

    async def execute(self, source: str, origin: str = "<script>") -> ExecutionRecord:
        """Run a script and record the result. Never raises for script errors."""
        if _in_script.get():
            record = await self._run(source, origin)
        else:
            async with self._lock:
                record = await self._run(source, origin)
        return self._append(record)

    async def execute_file(self, workspace: WorkspaceStore, path: str) -> ExecutionRecord:
        try:
            source = await workspace.read_file(path)
        except WorkspaceError as e:
            return self._append(
                ExecutionRecord(
                    output=f"Failed to execute file: {e}",
                    error=str(e),
                    error_type=type(e).__name__,
                    origin=path,
                )
            )
        return await self.execute(source, origin=path)

    async def _run(self, source: str, origin: str) -> ExecutionRecord:
        sink = OutputSink(limit=self.output_limit, origin=origin)
        surface = self.surface_provider() if self.surface_provider else None
        timers = Timers(sink)
        namespace = build_namespace(surface, sink, timers, self.allowed_modules, origin)
        started = time.perf_counter()
        token = _in_script.set(True)
        try:
            body, tail = compile_script(source, origin)
            await _evaluate(body, namespace)
            value = await _evaluate(tail, namespace) if tail is not None else None
        except BaseException as e:
            if isinstance(e, asyncio.CancelledError) and _host_cancelled():
                raise
            sink.close()
            error = ScriptError.from_exception(e, origin)
            log.info("%s failed: %s", origin, error.format_line(), extra={"tag": "script-err"})
            output = "\n".join(filter(None, [sink.getvalue(), error.format_line()]))
            return ExecutionRecord(
                output=output,
                error=error.message,
                error_type=error.error_type,
                origin=origin,
                duration=time.perf_counter() - started,
            )
        finally:
            _in_script.reset(token)
            timers.cancel_all()
            sink.close()

        output = sink.getvalue()
        if not output:
            output = str(value) if value is not None else SUCCESS_MARKER
        return ExecutionRecord(output=output, origin=origin, duration=time.perf_counter() - started)

    def _append(self, record: ExecutionRecord) -> ExecutionRecord:
        self._history.append(record)
        if self.events is not None:
            self.events.emit("history", record.origin)
        return record
