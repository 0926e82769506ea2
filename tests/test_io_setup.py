"""Tests for logger setup."""

import logging
from io import StringIO

from rich.console import Console

from openide.io.handlers import DisplayHandler, StatusHandler
from openide.io.setup import setup_logging


def make_console():
    output = StringIO()
    return Console(file=output, force_terminal=False), output


def test_setup_logging_returns_logger_and_status():
    console, _ = make_console()
    log, status = setup_logging(console)

    assert isinstance(log, logging.Logger)
    assert log.name == "openide"
    assert isinstance(status, StatusHandler)


def test_setup_logging_routes_status_tags():
    console, output = make_console()
    log, status = setup_logging(console)

    log.info("saved a.py", extra={"tag": "file"})

    assert "[file] saved a.py" in status.get_status()
    assert "file: saved a.py" in output.getvalue()


def test_setup_logging_keeps_script_output_out_of_status():
    console, output = make_console()
    log, status = setup_logging(console, level=logging.DEBUG)

    log.debug("hello", extra={"tag": "script-out"})

    assert status.get_status() == ""
    assert output.getvalue() == ""


def test_setup_logging_drops_untagged_records():
    console, output = make_console()
    log, status = setup_logging(console)

    log.info("no tag")

    assert status.get_status() == ""
    assert output.getvalue() == ""


def test_setup_logging_replaces_previous_handlers():
    console, _ = make_console()
    setup_logging(console)
    log, _ = setup_logging(console)

    display = [h for h in log.handlers if isinstance(h, DisplayHandler)]
    status = [h for h in log.handlers if isinstance(h, StatusHandler)]
    assert len(display) == 1
    assert len(status) == 1


def test_child_loggers_reach_status():
    console, _ = make_console()
    _, status = setup_logging(console)

    logging.getLogger("openide.reload").warning("rejected", extra={"tag": "reload"})

    assert status.get_status() == "[reload] WARNING rejected"
