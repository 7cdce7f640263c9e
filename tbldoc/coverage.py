"""Measurement of how much of a schema is documented."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .model import Schema


@dataclass
class TableCoverage:
    name: str
    coverage: float = 0.0
    covered: int = 0
    total: int = 0

    def _count(self, documented: bool) -> None:
        self.total += 1
        if documented:
            self.covered += 1


@dataclass
class Coverage:
    name: str
    coverage: float = 0.0
    tables: list[TableCoverage] = field(default_factory=list)
    covered: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation: names and percentages only."""
        return {
            "name": self.name,
            "coverage": self.coverage,
            "tables": [{"name": t.name, "coverage": t.coverage} for t in self.tables],
        }


def round_coverage(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def measure(schema: Schema) -> Coverage:
    """Count documented items: the schema description and every comment."""
    cover = Coverage(name=schema.name, total=1, covered=1 if schema.desc else 0)
    for table in schema.tables:
        table_cover = TableCoverage(name=table.name)
        cover.tables.append(table_cover)
        table_cover._count(table.comment != "")
        for item in [*table.columns, *table.indexes, *table.constraints, *table.triggers]:
            table_cover._count(item.comment != "")
        table_cover.coverage = round_coverage(table_cover.covered / table_cover.total * 100)
        cover.covered += table_cover.covered
        cover.total += table_cover.total
    cover.coverage = round_coverage(cover.covered / cover.total * 100)
    return cover