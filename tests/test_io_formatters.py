"""Tests for logging formatters."""

import logging

import pytest

from openide.io.formatters import RichFormatter, StatusFormatter


def make_record(msg, tag=None, level=logging.INFO):
    record = logging.LogRecord(name="test", level=level, pathname="", lineno=0, msg=msg, args=(), exc_info=None)
    if tag is not None:
        record.tag = tag
    return record


@pytest.mark.parametrize(
    "tag,expected",
    [
        ("script-out", "hello"),
        ("script-err", "[bold red]hello[/]"),
        ("file", "[dim]file:[/] hello"),
        ("tab", "[dim]tab:[/] hello"),
        ("plugin", "[magenta]plugin:[/] hello"),
        ("reload", "[bold yellow]reload:[/] hello"),
        (None, "hello"),
    ],
)
def test_rich_formatter_by_tag(tag, expected):
    assert RichFormatter().format(make_record("hello", tag)) == expected


def test_status_formatter_info():
    assert StatusFormatter().format(make_record("saved a.py", "file")) == "[file] saved a.py"


def test_status_formatter_shows_level_above_info():
    record = make_record("save failed", "reload", level=logging.WARNING)
    assert StatusFormatter().format(record) == "[reload] WARNING save failed"


def test_status_formatter_untagged():
    assert StatusFormatter().format(make_record("x")) == "[-] x"
