"""Lint rules that check a schema for missing documentation and design smells."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any

from .model import TYPE_FK, Schema
from .wildcard import match


@dataclass(frozen=True)
class RuleWarn:
    """A single finding reported by a lint rule."""

    target: str
    message: str


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _skip_table(name: str, exclude: Sequence[str], normalized: Sequence[str]) -> bool:
    return match(exclude, name) or match(normalized, name)


@dataclass
class Rule(ABC):
    """Base of every lint rule; a rule reports nothing unless enabled."""

    enabled: bool = False

    def is_enabled(self) -> bool:
        return self.enabled

    @abstractmethod
    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        """Return the warnings this rule raises for ``schema``."""

    @classmethod
    def _convert(cls, name: str, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return list(value)
        return value

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any] | None) -> Rule:
        if not data:
            return cls()
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in names and value is not None:
                kwargs[name] = cls._convert(name, value)
        return cls(**kwargs)


def _check_child_comments(
    schema: Schema,
    exclude: Sequence[str],
    rule_exclude: Sequence[str],
    exclude_tables: Sequence[str],
    all_or_nothing: bool,
    attribute: str,
    message: str,
) -> list[RuleWarn]:
    warns: list[RuleWarn] = []
    normalized = schema.normalize_table_names(exclude_tables)
    commented = False
    for table in schema.tables:
        if _skip_table(table.name, exclude, normalized):
            continue
        for item in getattr(table, attribute):
            target = f"{table.name}.{item.name}"
            if match(rule_exclude, item.name) or match(rule_exclude, target):
                continue
            if item.comment == "":
                warns.append(RuleWarn(target, message))
                continue
            commented = True
    if all_or_nothing and not commented:
        return []
    return warns


@dataclass
class RequireTableComment(Rule):
    """Every table must have a comment."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns: list[RuleWarn] = []
        normalized = schema.normalize_table_names(self.exclude)
        commented = False
        for table in schema.tables:
            if _skip_table(table.name, exclude, normalized):
                continue
            if table.comment == "":
                warns.append(RuleWarn(table.name, "table comment required."))
                continue
            commented = True
        if self.all_or_nothing and not commented:
            return []
        return warns


@dataclass
class RequireColumnComment(Rule):
    """Every column must have a comment."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)
    exclude_tables: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        return _check_child_comments(
            schema, exclude, self.exclude, self.exclude_tables, self.all_or_nothing,
            "columns", "column comment required.",
        )


@dataclass
class RequireIndexComment(Rule):
    """Every index must have a comment."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)
    exclude_tables: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        return _check_child_comments(
            schema, exclude, self.exclude, self.exclude_tables, self.all_or_nothing,
            "indexes", "index comment required.",
        )


@dataclass
class RequireConstraintComment(Rule):
    """Every constraint must have a comment."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)
    exclude_tables: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        return _check_child_comments(
            schema, exclude, self.exclude, self.exclude_tables, self.all_or_nothing,
            "constraints", "constraint comment required.",
        )


@dataclass
class RequireTriggerComment(Rule):
    """Every trigger must have a comment."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)
    exclude_tables: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        return _check_child_comments(
            schema, exclude, self.exclude, self.exclude_tables, self.all_or_nothing,
            "triggers", "trigger comment required.",
        )


@dataclass
class RequireTableLabels(Rule):
    """Every table must carry at least one label."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns: list[RuleWarn] = []
        normalized = schema.normalize_table_names(self.exclude)
        labeled = False
        for table in schema.tables:
            if _skip_table(table.name, exclude, normalized):
                continue
            if len(table.labels) == 0:
                warns.append(RuleWarn(table.name, "table labels required."))
                continue
            labeled = True
        if self.all_or_nothing and not labeled:
            return []
        return warns


@dataclass
class UnrelatedTable(Rule):
    """No table may be isolated from every relation."""

    all_or_nothing: bool = False
    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        normalized = schema.normalize_table_names(self.exclude)
        unrelated = {
            table.name: table
            for table in schema.tables
            if not _skip_table(table.name, exclude, normalized)
        }
        before = len(unrelated)
        for relation in schema.relations:
            unrelated.pop(relation.table.name, None)
            unrelated.pop(relation.parent_table.name, None)
        related = before != len(unrelated)
        warns: list[RuleWarn] = []
        if unrelated:
            names = " ".join(unrelated)
            warns.append(
                RuleWarn(schema.name, f"unrelated (isolated) table exists. [{names}]")
            )
        if self.all_or_nothing and not related:
            return []
        return warns


@dataclass
class ColumnCount(Rule):
    """No table may have more than ``max`` columns."""

    max: int = 0
    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        normalized = schema.normalize_table_names(self.exclude)
        return [
            RuleWarn(table.name, f"too many columns. [{len(table.columns)}/{self.max}]")
            for table in schema.tables
            if not _skip_table(table.name, exclude, normalized)
            and len(table.columns) > self.max
        ]


@dataclass
class RequireColumnsColumn:
    """A column that every table, apart from the excluded ones, must have."""

    name: str = ""
    exclude: list[str] = field(default_factory=list)


@dataclass
class RequireColumns(Rule):
    """Every table must have each of the listed columns."""

    columns: list[RequireColumnsColumn] = field(default_factory=list)

    @classmethod
    def _convert(cls, name: str, value: Any) -> Any:
        if name == "columns":
            return [
                item if isinstance(item, RequireColumnsColumn)
                else RequireColumnsColumn(
                    name=item.get("name") or "", exclude=list(item.get("exclude") or [])
                )
                for item in value
            ]
        return super()._convert(name, value)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns: list[RuleWarn] = []
        for table in schema.tables:
            if match(exclude, table.name):
                continue
            names = {column.name for column in table.columns}
            for required in self.columns:
                if match(required.exclude, table.name):
                    continue
                if required.name not in names:
                    warns.append(RuleWarn(table.name, f"column '{required.name}' required."))
        return warns


@dataclass
class DuplicateRelations(Rule):
    """No two relations may join the same columns of the same tables."""

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns: list[RuleWarn] = []
        seen: set[tuple[str, str, tuple[str, ...], tuple[str, ...]]] = set()
        for relation in schema.relations:
            table_name = relation.table.name
            parent_name = relation.parent_table.name
            if match(exclude, table_name) or match(exclude, parent_name):
                continue
            key = (
                table_name,
                parent_name,
                tuple(sorted(column.name for column in relation.columns)),
                tuple(sorted(column.name for column in relation.parent_columns)),
            )
            if key in seen:
                warns.append(
                    RuleWarn(table_name, f"duplicate relations. [{table_name} -> {parent_name}]")
                )
            seen.add(key)
        return warns


@dataclass
class RequireForeignKeyIndex(Rule):
    """Every foreign key column must be covered by an index."""

    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns: list[RuleWarn] = []
        for table in schema.tables:
            if match(exclude, table.name):
                continue
            indexed = {name for index in table.indexes for name in index.columns}
            for constraint in table.constraints:
                if constraint.type != TYPE_FK:
                    continue
                for column in constraint.columns:
                    target = f"{table.name}.{column}"
                    if match(self.exclude, column) or match(self.exclude, target):
                        continue
                    if column not in indexed:
                        warns.append(
                            RuleWarn(
                                target,
                                f"foreign key columns do not have an index. [{table.name}]",
                            )
                        )
        return warns


_BQ_KEY_RE = re.compile(
    r"[^A-Z0-9 !\"#$%&'()*+,\-./:;<=>?@\[\\\]^_{|}~`][^A-Z !\"#$%&'()*+,./:;<=>?@\[\\\]^{|}~`]*"
)
_BQ_VALUE_RE = re.compile(r"[^A-Z !\"#$%&'()*+,./:;<=>?@\[\\\]^{|}~`]*")


def check_label_style_bigquery(label: str) -> bool:
    """Return whether ``label`` is a BigQuery style ``key:value`` label."""
    if label.count(":") != 1:
        return False
    key, value = label.split(":")
    key_length = len(key.encode("utf-8"))
    if key_length == 0 or key_length > 63:
        return False
    if len(value.encode("utf-8")) > 63:
        return False
    return _BQ_KEY_RE.fullmatch(key) is not None and _BQ_VALUE_RE.fullmatch(value) is not None


@dataclass
class LabelStyleBigQuery(Rule):
    """Schema and table labels must be in BigQuery ``key:value`` style."""

    exclude: list[str] = field(default_factory=list)

    def check(self, schema: Schema, exclude: Sequence[str]) -> list[RuleWarn]:
        if not self.is_enabled():
            return []
        warns = [
            RuleWarn(
                f"{schema.name}.Labels.{label.name}",
                "required to be in BigQuery `key:value` style. "
                f"[label `{label.name}` in database `{schema.name}`]",
            )
            for label in schema.labels
            if not check_label_style_bigquery(label.name)
        ]
        normalized = schema.normalize_table_names(self.exclude)
        for table in schema.tables:
            if _skip_table(table.name, exclude, normalized):
                continue
            for label in table.labels:
                if not check_label_style_bigquery(label.name):
                    warns.append(
                        RuleWarn(
                            f"{table.name}.Labels.{label.name}",
                            "required to be in BigQuery `key:value` style. "
                            f"[label `{label.name}` in table `{table.name}`]",
                        )
                    )
        return warns


_LINT_KEYS = {
    "require_table_comment": "requireTableComment",
    "require_column_comment": "requireColumnComment",
    "require_index_comment": "requireIndexComment",
    "require_constraint_comment": "requireConstraintComment",
    "require_trigger_comment": "requireTriggerComment",
    "require_table_labels": "requireTableLabels",
    "unrelated_table": "unrelatedTable",
    "column_count": "columnCount",
    "require_columns": "requireColumns",
    "duplicate_relations": "duplicateRelations",
    "require_foreign_key_index": "requireForeignKeyIndex",
    "label_style_bigquery": "labelStyleBigQuery",
}


@dataclass
class Lint:
    """The full set of lint rules, each configured separately."""

    require_table_comment: RequireTableComment = field(default_factory=RequireTableComment)
    require_column_comment: RequireColumnComment = field(default_factory=RequireColumnComment)
    require_index_comment: RequireIndexComment = field(default_factory=RequireIndexComment)
    require_constraint_comment: RequireConstraintComment = field(
        default_factory=RequireConstraintComment
    )
    require_trigger_comment: RequireTriggerComment = field(default_factory=RequireTriggerComment)
    require_table_labels: RequireTableLabels = field(default_factory=RequireTableLabels)
    unrelated_table: UnrelatedTable = field(default_factory=UnrelatedTable)
    column_count: ColumnCount = field(default_factory=ColumnCount)
    require_columns: RequireColumns = field(default_factory=RequireColumns)
    duplicate_relations: DuplicateRelations = field(default_factory=DuplicateRelations)
    require_foreign_key_index: RequireForeignKeyIndex = field(
        default_factory=RequireForeignKeyIndex
    )
    label_style_bigquery: LabelStyleBigQuery = field(default_factory=LabelStyleBigQuery)

    def rules(self) -> list[Rule]:
        """Return every rule in a fixed order."""
        return [getattr(self, f.name) for f in fields(self)]

    def check(self, schema: Schema, exclude: Iterable[str] = ()) -> list[RuleWarn]:
        """Run every rule; ``exclude`` names tables that no rule looks at."""
        normalized = schema.normalize_table_names(exclude)
        return [warn for rule in self.rules() for warn in rule.check(schema, normalized)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Lint:
        """Build the rule set from a mapping with camelCase keys as in a config file."""
        if not data:
            return cls()
        kwargs = {}
        for f in fields(cls):
            key = _LINT_KEYS[f.name]
            if key in data:
                rule_class = type(f.default_factory())
                kwargs[f.name] = rule_class._from_mapping(data[key])
        return cls(**kwargs)