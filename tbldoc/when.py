"""Evaluation of ``--when`` execution conditions against the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Any


class ConditionError(ValueError):
    """Raised when a condition cannot be parsed or evaluated."""


_TOKEN_RE = re.compile(
    r"""\s*(?:
      (?P<number>\d+(?:\.\d+)?)
    | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    | (?P<name>[A-Za-z_]\w*)
    | (?P<op>==|!=|<=|>=|&&|\|\||[<>!().\[\]])
    )""",
    re.VERBOSE,
)

_LITERALS = {"true": True, "false": False, "nil": None}


def _tokenize(expression: str) -> list[tuple[str, str]]:
    tokens = []
    pos = 0
    expression = expression.rstrip()
    while pos < len(expression):
        found = _TOKEN_RE.match(expression, pos)
        if found is None or found.lastgroup is None:
            raise ConditionError(f"unexpected character at position {pos} in {expression!r}")
        tokens.append((found.lastgroup, found.group(found.lastgroup)))
        pos = found.end()
    tokens.append(("end", ""))
    return tokens


def _equal(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


class _Parser:
    def __init__(self, expression: str, env: Mapping[str, str]) -> None:
        self._tokens = _tokenize(expression)
        self._pos = 0
        self._env = dict(env)

    def _take(self, *texts: str) -> str | None:
        kind, text = self._tokens[self._pos]
        if kind in ("op", "name") and text in texts:
            self._pos += 1
            return text
        return None

    def _next(self) -> tuple[str, str]:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse(self) -> Any:
        value = self._or()
        if self._tokens[self._pos][0] != "end":
            raise ConditionError(f"unexpected token {self._tokens[self._pos][1]!r}")
        return value

    def _or(self) -> Any:
        left = self._and()
        while self._take("||", "or"):
            right = self._and()
            left = self._bool(left) or self._bool(right)
        return left

    def _and(self) -> Any:
        left = self._comparison()
        while self._take("&&", "and"):
            right = self._comparison()
            left = self._bool(left) and self._bool(right)
        return left

    def _comparison(self) -> Any:
        left = self._unary()
        while (operator := self._take("==", "!=", "<", ">", "<=", ">=")) is not None:
            right = self._unary()
            if operator == "==":
                left = _equal(left, right)
            elif operator == "!=":
                left = not _equal(left, right)
            else:
                if type(left) is not type(right) or not isinstance(left, (int, float, str)):
                    raise ConditionError(f"invalid operation: {left!r} {operator} {right!r}")
                left = {"<": left < right, ">": left > right,
                        "<=": left <= right, ">=": left >= right}[operator]
        return left

    def _unary(self) -> Any:
        if self._take("!", "not"):
            return not self._bool(self._unary())
        return self._postfix()

    def _postfix(self) -> Any:
        value = self._primary()
        while True:
            if self._take("."):
                kind, key = self._next()
                if kind != "name":
                    raise ConditionError(f"expected a name after '.', got {key!r}")
            elif self._take("["):
                key = self._or()
                if not self._take("]"):
                    raise ConditionError("expected ']'")
            else:
                return value
            if not isinstance(value, Mapping):
                raise ConditionError(f"cannot fetch {key!r} from {value!r}")
            value = value.get(key)

    def _primary(self) -> Any:
        kind, text = self._next()
        if kind == "number":
            return float(text) if "." in text else int(text)
        if kind == "string":
            return re.sub(r"\\(.)", r"\1", text[1:-1])
        if kind == "name" and text in _LITERALS:
            return _LITERALS[text]
        if kind == "name" and text == "Env":
            return self._env
        if text == "(":
            value = self._or()
            if not self._take(")"):
                raise ConditionError("expected ')'")
            return value
        raise ConditionError(f"unexpected token {text or 'end of input'!r}")

    @staticmethod
    def _bool(value: Any) -> bool:
        if not isinstance(value, bool):
            raise ConditionError(f"expected a boolean, got {value!r}")
        return value


def evaluate_condition(expression: str, env: Mapping[str, str] | None = None) -> Any:
    """Evaluate an expression in which ``Env`` is the given environment mapping."""
    return _Parser(expression, os.environ if env is None else env).parse()


def is_allowed_to_execute(when: str, env: Mapping[str, str] | None = None) -> bool:
    """Return whether ``when`` holds; an empty condition always holds.

    ``$NAME`` in the condition refers to the environment variable ``NAME``.
    """
    if when == "":
        return True
    environment = dict(os.environ if env is None else env)
    if environment:
        names = sorted(environment, key=len, reverse=True)
        pattern = re.compile("|".join(re.escape(f"${name}") for name in names))
        when = pattern.sub(lambda m: f"Env.{m.group()[1:]}", when)
    return evaluate_condition(f"({when}) == true", environment) is True