"""Simple ``*`` wildcard matching used for table, column and label filters."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


def match_simple(pattern: str, name: str) -> bool:
    """Return whether ``name`` matches ``pattern``, where only ``*`` is special."""
    if pattern == "":
        return name == pattern
    if pattern == "*":
        return True
    return _compile(pattern).fullmatch(name) is not None


def match_length(patterns: Iterable[str], name: str) -> int | None:
    """Return the literal length of the first pattern matching ``name``, or None."""
    for pattern in patterns:
        if match_simple(pattern, name):
            return len(pattern.replace("*", ""))
    return None


def match(patterns: Iterable[str], name: str) -> bool:
    """Return whether any of ``patterns`` matches ``name``."""
    return match_length(patterns, name) is not None


def match_labels(patterns: Iterable[str], labels: Iterable[Any]) -> bool:
    """Return whether any label's ``name`` matches any of ``patterns``."""
    pattern_list = list(patterns)
    return any(match_simple(pattern, label.name) for label in labels for pattern in pattern_list)