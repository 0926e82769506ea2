"""Explicit change notification for front ends and internal subscribers."""

from __future__ import annotations

import logging
from collections.abc import Callable

from openide.core.models import ChangeEvent, ChangeKind

Listener = Callable[[ChangeEvent], None]

log = logging.getLogger("openide.events")


class EventEmitter:
    """Delivers typed change events to subscribed listeners, in subscription order."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Subscribe a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, kind: ChangeKind, detail: str = "") -> None:
        event = ChangeEvent(kind=kind, detail=detail)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception("change listener failed for %s event", kind)
