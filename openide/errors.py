"""Exception types raised by the workspace and execution core."""

from __future__ import annotations


class IDEError(Exception):
    """Base class for all openide errors."""


class WorkspaceError(IDEError):
    """Failure inside the workspace store."""


class NotFoundError(WorkspaceError):
    """A workspace path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} does not exist")


class StorageError(WorkspaceError):
    """The backing storage failed to complete an operation."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class InvalidPathError(WorkspaceError, ValueError):
    """A path is absolute or escapes the workspace root."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path!r} is not a workspace-relative path")


class ScriptError(IDEError):
    """An exception raised while evaluating a sandboxed script."""

    def __init__(self, message: str, error_type: str = "Exception", lineno: int | None = None, origin: str = ""):
        self.message = message
        self.error_type = error_type
        self.lineno = lineno
        self.origin = origin
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: BaseException, origin: str) -> ScriptError:
        """Wrap an exception, pulling the line number from the script's frames."""
        lineno = None
        if isinstance(exc, SyntaxError):
            lineno = exc.lineno
            message = exc.msg
        else:
            message = str(exc)
            tb = exc.__traceback__
            while tb is not None:
                if tb.tb_frame.f_code.co_filename == origin:
                    lineno = tb.tb_lineno
                tb = tb.tb_next
        return cls(message, type(exc).__name__, lineno, origin)

    def format_line(self) -> str:
        """Human-readable one-line rendering for execution output."""
        line = f"Execution error: {self.error_type}: {self.message}"
        if self.lineno is not None:
            line += f" (line {self.lineno})"
        return line


class ConflictError(IDEError):
    """An operation conflicts with current state. The registry never raises it."""


class ReloadInProgressError(ConflictError):
    """A hot reload was requested while another one is running."""

    def __init__(self) -> None:
        super().__init__("reload in progress")
