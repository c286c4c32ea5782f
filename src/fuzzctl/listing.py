"""Parsing of kubectl's tabular output.

kubectl prints a header row of upper-case column names followed by rows
aligned to the header. Only the header carries structure; rows are located
either by word position or, when a cell is blank, by the header's character
offsets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .text import strip_ansi, trim_collapse


@dataclass(frozen=True)
class Column:
    name: str
    index: int
    offset: int


@dataclass
class ColumnTable:
    """Column positions derived once from a listing's header row."""

    columns: List[Column] = field(default_factory=list)

    @classmethod
    def from_header(cls, header: str) -> "ColumnTable":
        header = strip_ansi(header)
        columns: List[Column] = []
        position = 0
        for index, name in enumerate(header.split()):
            offset = header.index(name, position)
            columns.append(Column(name=name, index=index, offset=offset))
            position = offset + len(name)
        return cls(columns)

    def _lookup(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def index(self, name: str) -> Optional[int]:
        """Word position of ``name`` in the header, or None if absent."""
        column = self._lookup(name)
        return column.index if column else None

    def offset(self, name: str) -> Optional[int]:
        column = self._lookup(name)
        return column.offset if column else None

    def value(self, row: str, name: str) -> Optional[str]:
        """Extract the cell for column ``name`` from ``row``.

        Rows with one word per column are read by word position. Rows with
        blank cells (or cells containing spaces) are sliced between this
        column's offset and the next column's offset.
        """
        column = self._lookup(name)
        if column is None:
            return None
        row = strip_ansi(row)
        words = row.split()
        if len(words) == len(self.columns):
            return words[column.index]
        end = None
        if column.index + 1 < len(self.columns):
            end = self.columns[column.index + 1].offset
        cell = trim_collapse(row[column.offset:end])
        return cell or None


@dataclass
class Listing:
    """Raw tabular output split into its header and data rows."""

    header: Optional[str]
    rows: List[str]

    @classmethod
    def parse(cls, text: str) -> "Listing":
        lines = [line for line in text.splitlines() if strip_ansi(line).strip()]
        if not lines:
            return cls(header=None, rows=[])
        # multi-type listings (pods,services or all) repeat a header per type
        first = strip_ansi(lines[0]).split()[0]
        rows = [line for line in lines[1:] if strip_ansi(line).split()[0] != first]
        return cls(header=lines[0], rows=rows)

    @property
    def empty(self) -> bool:
        return not self.rows

    def columns(self) -> ColumnTable:
        return ColumnTable.from_header(self.header or "")


@dataclass(frozen=True)
class Selection:
    name: str
    namespace: Optional[str] = None

    def describe(self) -> str:
        return f"{self.name} (namespace: {self.namespace or 'n/a'})"
