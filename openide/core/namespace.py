"""Sandbox namespace: the only names a script can resolve."""

from __future__ import annotations

import asyncio
import builtins
import contextvars
import inspect
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from openide.core.executor import OutputSink
    from openide.core.surface import CapabilitySurface

log = logging.getLogger("openide.sandbox")

SAFE_BUILTINS = (
    "abs", "all", "any", "ascii", "bin", "bool", "bytearray", "bytes", "callable", "chr",
    "classmethod", "complex", "dict", "divmod", "enumerate", "filter", "float", "format",
    "frozenset", "hasattr", "hash", "hex", "int", "isinstance", "issubclass", "iter", "len",
    "list", "map", "max", "min", "next", "object", "oct", "ord", "pow", "property", "range",
    "repr", "reversed", "round", "set", "slice", "sorted", "staticmethod", "str", "sum",
    "super", "tuple", "zip",
    "ArithmeticError", "AssertionError", "AttributeError", "Exception", "IndexError",
    "KeyError", "LookupError", "NameError", "NotImplementedError", "RuntimeError",
    "StopAsyncIteration", "StopIteration", "TypeError", "ValueError", "ZeroDivisionError",
)


def guarded_import(allowed: Iterable[str]) -> Callable[..., Any]:
    """Return an ``__import__`` that only admits whitelisted top-level modules."""
    allowed = frozenset(allowed)

    def _import(name: str, globals=None, locals=None, fromlist=(), level: int = 0) -> Any:
        if level != 0 or name.split(".")[0] not in allowed:
            raise ImportError(f"Module '{name}' not found")
        return builtins.__import__(name, globals, locals, fromlist, level)

    return _import


def safe_builtins(allowed_modules: Iterable[str] = ()) -> dict[str, Any]:
    names = {name: getattr(builtins, name) for name in SAFE_BUILTINS}
    # Needed for class statements in scripts
    names["__build_class__"] = builtins.__build_class__
    names["__import__"] = guarded_import(allowed_modules)
    return names


class ScriptConsole:
    """The ``console`` object scripts log through."""

    def __init__(self, sink: OutputSink):
        self._sink = sink

    def log(self, *args: Any) -> None:
        self._sink.log(*args)

    info = log

    def error(self, *args: Any) -> None:
        self._sink.error(*args)

    warn = error

    def print(self, *args: Any, sep: str = " ", end: str = "\n", **_: Any) -> None:
        self._sink.write(sep.join(str(a) for a in args), end)


class Timers:
    """Timer primitives bound to the running event loop.

    Callbacks run in the context captured when the timers were created, not in
    the context of the script that scheduled them. The sandbox cancels
    whatever is still pending when the script finishes.
    """

    def __init__(self, sink: OutputSink):
        self._sink = sink
        self._context = contextvars.copy_context()
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task] = set()
        self._next_id = 0

    def set_timeout(self, callback: Callable[..., Any], delay: float = 0, *args: Any) -> int:
        timer_id = self._new_id()
        self._schedule(timer_id, delay, callback, args, repeat=False)
        return timer_id

    def set_interval(self, callback: Callable[..., Any], delay: float, *args: Any) -> int:
        timer_id = self._new_id()
        self._schedule(timer_id, max(delay, 0.001), callback, args, repeat=True)
        return timer_id

    def clear(self, timer_id: int) -> None:
        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for timer_id in list(self._handles):
            self.clear(timer_id)
        for task in list(self._tasks):
            task.cancel()

    @property
    def pending(self) -> int:
        return len(self._handles) + len(self._tasks)

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _schedule(self, timer_id: int, delay: float, callback: Callable[..., Any], args: tuple, repeat: bool) -> None:
        loop = asyncio.get_running_loop()

        def fire() -> None:
            if repeat:
                self._schedule(timer_id, delay, callback, args, repeat)
            else:
                self._handles.pop(timer_id, None)
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    task = asyncio.ensure_future(result)
                    self._tasks.add(task)
                    task.add_done_callback(self._task_done)
            except Exception as e:
                self._sink.error(f"timer callback failed: {type(e).__name__}: {e}")

        self._handles[timer_id] = loop.call_later(delay, fire, context=self._context)

    def _task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._sink.error(f"timer callback failed: {type(exc).__name__}: {exc}")


def build_namespace(
    surface: CapabilitySurface | None,
    sink: OutputSink,
    timers: Timers,
    allowed_modules: Iterable[str] = (),
    origin: str = "<script>",
) -> dict[str, Any]:
    """Build the globals for one script run.

    Holds whitelisted builtins, the console, timer primitives and the
    capability surface as ``api``. Nothing else from the host is reachable.
    """
    console = ScriptConsole(sink)
    return {
        "__builtins__": safe_builtins(allowed_modules),
        "__name__": "__script__",
        "__file__": origin,
        "console": console,
        "print": console.print,
        "api": surface,
        "set_timeout": timers.set_timeout,
        "set_interval": timers.set_interval,
        "clear_timeout": timers.clear,
        "clear_interval": timers.clear,
        "sleep": asyncio.sleep,
    }
