"""Named capability extensions registered by scripts."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from openide.core.events import EventEmitter
from openide.core.models import Plugin

if TYPE_CHECKING:
    from openide.core.surface import CapabilitySurface

log = logging.getLogger("openide.registry")


class ExtensionRegistry:
    """Plugin registry with last-write-wins registration.

    The plugin's init hook runs synchronously inside ``register``. A hook that
    raises, or that is a coroutine function, is recorded in ``errors``; the
    registration still takes effect.
    """

    def __init__(
        self,
        surface_provider: Callable[[], CapabilitySurface | None] | None = None,
        events: EventEmitter | None = None,
    ):
        self.surface_provider = surface_provider
        self.events = events
        self.errors: list[str] = []
        self._plugins: dict[str, Plugin] = {}

    def register(self, name: str, plugin: Any) -> Plugin:
        entry = Plugin.coerce(name, plugin)
        replaced = name in self._plugins
        self._plugins[name] = entry
        log.info("%s plugin '%s'", "replaced" if replaced else "registered", name, extra={"tag": "plugin"})

        if entry.init_hook is not None:
            surface = self.surface_provider() if self.surface_provider else None
            try:
                result = entry.init_hook(surface)
            except Exception as e:
                self._hook_failed(f"{name}: {type(e).__name__}: {e}")
            else:
                if inspect.isawaitable(result):
                    if inspect.iscoroutine(result):
                        result.close()
                    self._hook_failed(f"{name}: init hook must be synchronous")

        if self.events is not None:
            self.events.emit("plugins", name)
        return entry

    def unregister(self, name: str) -> None:
        if self._plugins.pop(name, None) is not None and self.events is not None:
            self.events.emit("plugins", name)

    def _hook_failed(self, message: str) -> None:
        self.errors.append(message)
        log.warning("init hook failed for %s", message, extra={"tag": "plugin"})

    def get(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    def list(self) -> set[str]:
        return set(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)
