"""Tests for logging filters."""

import logging

from openide.io.filters import TagFilter


def make_record(tag=None):
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0, msg="hello", args=(), exc_info=None
    )
    if tag is not None:
        record.tag = tag
    return record


def test_tag_filter_allows_matching_tag():
    f = TagFilter({"file", "reload"})
    assert f.filter(make_record("file")) is True


def test_tag_filter_blocks_non_matching_tag():
    f = TagFilter({"file"})
    assert f.filter(make_record("script-out")) is False


def test_tag_filter_blocks_untagged_records():
    f = TagFilter({"file"})
    assert f.filter(make_record()) is False


def test_exclude_mode_inverts_match():
    f = TagFilter({"script-out", "script-err"}, exclude=True)
    assert f.filter(make_record("reload")) is True
    assert f.filter(make_record("script-out")) is False


def test_exclude_mode_still_drops_untagged_records():
    f = TagFilter({"script-out"}, exclude=True)
    assert f.filter(make_record()) is False
