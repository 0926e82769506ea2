"""Logging filters for tag-based routing."""

import logging
from collections.abc import Iterable


class TagFilter(logging.Filter):
    """Pass records whose tag is in ``tags``, or not in it when ``exclude`` is set.

    Untagged records never pass.
    """

    def __init__(self, tags: Iterable[str], exclude: bool = False) -> None:
        super().__init__()
        self.tags = frozenset(tags)
        self.exclude = exclude

    def filter(self, record: logging.LogRecord) -> bool:
        tag = getattr(record, "tag", None)
        if tag is None:
            return False
        return (tag in self.tags) is not self.exclude
