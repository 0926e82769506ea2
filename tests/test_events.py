"""Tests for EventEmitter."""

import logging

from openide.core.events import EventEmitter


def test_listeners_called_in_order():
    events = EventEmitter()
    calls = []
    events.on_change(lambda e: calls.append(("a", e.kind)))
    events.on_change(lambda e: calls.append(("b", e.kind)))

    events.emit("tree", "x")

    assert calls == [("a", "tree"), ("b", "tree")]


def test_unsubscribe_is_idempotent():
    events = EventEmitter()
    calls = []
    unsubscribe = events.on_change(calls.append)
    unsubscribe()
    unsubscribe()
    events.emit("tabs")
    assert calls == []


def test_failing_listener_does_not_block_others(caplog):
    events = EventEmitter()
    calls = []

    def broken(event):
        raise RuntimeError("listener bug")

    events.on_change(broken)
    events.on_change(calls.append)

    with caplog.at_level(logging.ERROR, logger="openide.events"):
        events.emit("plugins", "p")

    assert [e.detail for e in calls] == ["p"]
    assert "change listener failed" in caplog.text
