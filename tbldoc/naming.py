"""Naming strategies that guess a column's parent table and column."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

Namer = Callable[[str], str]

_ID_COLUMN = "id"

_IRREGULAR_PLURALS = {
    "person": "people", "man": "men", "woman": "women", "child": "children",
    "tooth": "teeth", "foot": "feet", "mouse": "mice", "goose": "geese",
    "ox": "oxen", "schema": "schemata", "quiz": "quizzes",
}
_IRREGULAR_SINGULARS = {plural: single for single, plural in _IRREGULAR_PLURALS.items()}

_UNCOUNTABLES = frozenset(
    "equipment information rice money species series fish sheep deer news "
    "police software hardware staff traffic research metadata".split()
)

_PLURAL_RULES = [
    (r"(matr)ix$", r"\1ices"),
    (r"(vert|ind)ex$", r"\1ices"),
    (r"(alias|status|bus)$", r"\1es"),
    (r"(x|ch|ss|sh|zz)$", r"\1es"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"([lr])f$", r"\1ves"),
    (r"([^f])fe$", r"\1ves"),
    (r"sis$", "ses"),
    (r"([ti])um$", r"\1a"),
    (r"s$", "s"),
    (r"$", "s"),
]

_SINGULAR_RULES = [
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(alias|status|bus)es$", r"\1"),
    (r"(x|ch|ss|sh|zz)es$", r"\1"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"([^f])ves$", r"\1fe"),
    (r"(analy|diagno|the|cri|progno|synop|parenthe)ses$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(ss|us)$", r"\1"),
    (r"s$", ""),
]


def _inflect(word: str, irregulars: dict[str, str], known: dict[str, str],
             rules: list[tuple[str, str]]) -> str:
    lower = word.lower()
    if not word or lower in _UNCOUNTABLES or lower in known:
        return word
    if lower in irregulars:
        result = irregulars[lower]
        if word.isupper():
            return result.upper()
        return result.capitalize() if word[0].isupper() else result
    for pattern, replacement in rules:
        if re.search(pattern, word, re.IGNORECASE):
            return re.sub(pattern, replacement, word, count=1, flags=re.IGNORECASE)
    return word


def pluralize(word: str) -> str:
    """Return the plural form of an English word."""
    return _inflect(word, _IRREGULAR_PLURALS, _IRREGULAR_SINGULARS, _PLURAL_RULES)


def singularize(word: str) -> str:
    """Return the singular form of an English word."""
    return _inflect(word, _IRREGULAR_SINGULARS, _IRREGULAR_PLURALS, _SINGULAR_RULES)


def _checked_name(name: str) -> str:
    if not isinstance(name, str):
        raise TypeError(f"column name must be a string, not {type(name).__name__}")
    return name


def _id_prefix(name: str) -> str | None:
    head, sep, tail = _checked_name(name).rpartition("_")
    return head if sep and tail == _ID_COLUMN else None


def default_parent_table_namer(name: str) -> str:
    """``user_id`` -> ``users``; empty when the column is not ``<name>_id``."""
    prefix = _id_prefix(name)
    return "" if prefix is None else pluralize(prefix)


def default_parent_column_namer(name: str) -> str:
    """Every column points at the parent's ``id`` column."""
    _checked_name(name)
    return _ID_COLUMN


def singular_table_parent_table_namer(name: str) -> str:
    """``user_id`` -> ``user``; empty when the column is not ``<name>_id``."""
    prefix = _id_prefix(name)
    return "" if prefix is None else singularize(prefix)


def singular_table_parent_column_namer(name: str) -> str:
    """Every column points at the parent's ``id`` column."""
    _checked_name(name)
    return _ID_COLUMN


def identical_parent_column_namer(name: str) -> str:
    """The parent column carries the same name as the child column."""
    return _checked_name(name)


@dataclass(frozen=True)
class NamingStrategy:
    """A pair of functions naming the parent table and column of a column."""

    parent_table: Namer
    parent_column: Namer

    def parent_table_name(self, name: str) -> str:
        return self.parent_table(name)

    def parent_column_name(self, name: str) -> str:
        return self.parent_column(name)


_DEFAULT = NamingStrategy(default_parent_table_namer, default_parent_column_namer)

_STRATEGIES = {
    "": _DEFAULT,
    "default": _DEFAULT,
    "singularTableName": NamingStrategy(singular_table_parent_table_namer, singular_table_parent_column_namer),
    "identical": NamingStrategy(default_parent_table_namer, identical_parent_column_namer),
    "identicalSingularTableName": NamingStrategy(singular_table_parent_table_namer, identical_parent_column_namer),
}


def select_naming_strategy(name: str) -> NamingStrategy:
    """Return the naming strategy called ``name``."""
    try:
        return _STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Naming strategy does not exist. strategy: {name}") from None