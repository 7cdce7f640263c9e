"""Extraction of a single option value from a raw argument list."""

from __future__ import annotations

from collections.abc import Sequence


def pick_option(args: Sequence[str], opts: Sequence[str]) -> tuple[str, list[str]]:
    """Pull the value of any of ``opts`` out of ``args``.

    Both ``--opt value`` and ``--opt=value`` are understood; the last one wins.
    Returns the value (empty when absent) and the remaining arguments.
    """
    value = ""
    remains: list[str] = []
    skip_next = False
    for position, arg in enumerate(args):
        if arg in opts:
            value = args[position + 1]
            skip_next = True
        elif any(arg.startswith(f"{opt}=") for opt in opts):
            value = arg.split("=")[1]
        elif skip_next:
            skip_next = False
        else:
            remains.append(arg)
    return value, remains