"""In-memory model of a database schema: tables, columns, relations and labels."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

TYPE_FK = "FOREIGN KEY"

HIDEABLE_COLUMNS = [
    "Extra Definition",
    "Occurrences",
    "Percents",
    "Children",
    "Parents",
    "Comment",
    "Labels",
]


class NotFoundError(LookupError):
    """Raised when a named schema object does not exist."""


class Cardinality(str, Enum):
    ZERO_OR_ONE = "zero_or_one"
    EXACTLY_ONE = "exactly_one"
    ZERO_OR_MORE = "zero_or_more"
    ONE_OR_MORE = "one_or_more"
    UNKNOWN = ""


def to_cardinality(value: str) -> Cardinality:
    """Parse a cardinality name; spaces, hyphens and case are ignored."""
    normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
    for cardinality in Cardinality:
        if cardinality.value == normalized:
            return cardinality
    raise ValueError(f"unsupported cardinality: {value}")


@dataclass
class Label:
    name: str
    virtual: bool = False


class Labels(list):
    """An ordered collection of labels with unique names."""

    def merge(self, name: str) -> Labels:
        """Return these labels plus a virtual label ``name`` if it is not present."""
        if self.contains(name):
            return Labels(self)
        return Labels([*self, Label(name, virtual=True)])

    def contains(self, name: str) -> bool:
        return any(label.name == name for label in self)


@dataclass(eq=False)
class Column:
    name: str
    type: str = ""
    nullable: bool = False
    default: str | None = None
    comment: str = ""
    extra_def: str = ""
    labels: Labels = field(default_factory=Labels)
    pk: bool = False
    fk: bool = False
    hide_for_er: bool = False
    parent_relations: list[Relation] = field(default_factory=list, repr=False)
    child_relations: list[Relation] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class Index:
    name: str
    definition: str = ""
    table: str | None = None
    columns: list[str] = field(default_factory=list)
    comment: str = ""


@dataclass(eq=False)
class Constraint:
    name: str
    type: str = ""
    definition: str = ""
    table: str | None = None
    referenced_table: str | None = None
    columns: list[str] = field(default_factory=list)
    referenced_columns: list[str] = field(default_factory=list)
    comment: str = ""


@dataclass(eq=False)
class Trigger:
    name: str
    definition: str = ""
    comment: str = ""


@dataclass(eq=False)
class Relation:
    table: Table | None = field(default=None, repr=False)
    columns: list[Column] = field(default_factory=list, repr=False)
    parent_table: Table | None = field(default=None, repr=False)
    parent_columns: list[Column] = field(default_factory=list, repr=False)
    cardinality: Cardinality = Cardinality.UNKNOWN
    parent_cardinality: Cardinality = Cardinality.UNKNOWN
    definition: str = ""
    virtual: bool = False
    hide_for_er: bool = False


def _find(items: Iterable, name: str, kind: str):
    for item in items:
        if item.name == name:
            return item
    raise NotFoundError(f"not found {kind} '{name}'")


@dataclass(eq=False)
class Table:
    name: str
    type: str = ""
    comment: str = ""
    definition: str = ""
    columns: list[Column] = field(default_factory=list)
    indexes: list[Index] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list)
    labels: Labels = field(default_factory=Labels)

    def find_column_by_name(self, name: str) -> Column:
        return _find(self.columns, name, f"column '{self.name}.{name}': column")

    def find_index_by_name(self, name: str) -> Index:
        return _find(self.indexes, name, "index")

    def find_constraint_by_name(self, name: str) -> Constraint:
        return _find(self.constraints, name, "constraint")

    def find_trigger_by_name(self, name: str) -> Trigger:
        return _find(self.triggers, name, "trigger")


def _same_members(found: Sequence[Column], wanted: Sequence[Column]) -> bool:
    return len(found) == len(wanted) and all(
        any(column is other for other in wanted) for column in found
    )


@dataclass(eq=False)
class Schema:
    name: str = ""
    desc: str = ""
    tables: list[Table] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list, repr=False)
    labels: Labels = field(default_factory=Labels)
    current_schema: str = ""

    def find_table_by_name(self, name: str) -> Table:
        return _find(self.tables, name, "table")

    def find_relation(self, columns: Sequence[Column], parent_columns: Sequence[Column]) -> Relation:
        """Return the relation joining exactly these column objects."""
        for relation in self.relations:
            if _same_members(relation.columns, columns) and _same_members(
                relation.parent_columns, parent_columns
            ):
                return relation
        raise NotFoundError("not found relation")

    def normalize_table_names(self, names: Iterable[str]) -> list[str]:
        """Qualify unqualified table names with the current schema, if one is set."""
        if not self.current_schema:
            return list(names)
        return [name if "." in name else f"{self.current_schema}.{name}" for name in names]