"""
================================================================================
In-Memory Workbook Model
================================================================================

Ordered sheets of sparse rows. Row and column indexes are zero-based here;
the public store translates its 1-based API into these indexes.

Row 0 of a sheet is the header row.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .cells import Cell, render_cell


Row = Dict[int, Cell]


@dataclass
class Sheet:
    """A named sheet holding rows keyed by zero-based row index."""
    name: str
    rows: Dict[int, Row] = field(default_factory=dict)

    @property
    def last_row_index(self) -> int:
        """Highest physically present row index, -1 for an empty sheet."""
        return max(self.rows) if self.rows else -1

    @property
    def header(self) -> Optional[Row]:
        return self.rows.get(0)

    def header_width(self) -> int:
        """
        Number of header positions: last header cell index + 1.

        Returns -1 when there is no header row and 0 when it holds no cells.
        """
        header = self.header
        if header is None:
            return -1
        return max(header) + 1 if header else 0

    def find_column(self, name: str) -> int:
        """
        Locate a header column by name, case-insensitive and trimmed.

        Returns:
            Zero-based column index, or -1 when absent
        """
        header = self.header
        if not header:
            return -1
        wanted = name.strip().lower()
        for col_idx in sorted(header):
            if render_cell(header[col_idx]).strip().lower() == wanted:
                return col_idx
        return -1

    def get(self, row_idx: int, col_idx: int) -> Optional[Cell]:
        row = self.rows.get(row_idx)
        if row is None:
            return None
        return row.get(col_idx)

    def ensure_row(self, row_idx: int) -> Row:
        return self.rows.setdefault(row_idx, {})

    def put(self, row_idx: int, col_idx: int, cell: Cell) -> None:
        self.ensure_row(row_idx)[col_idx] = cell

    def remove(self, row_idx: int, col_idx: int) -> bool:
        row = self.rows.get(row_idx)
        if row is None or col_idx not in row:
            return False
        del row[col_idx]
        return True

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        """Yield (row_idx, col_idx, cell) in row-major order."""
        for row_idx in sorted(self.rows):
            row = self.rows[row_idx]
            for col_idx in sorted(row):
                yield row_idx, col_idx, row[col_idx]


@dataclass
class Workbook:
    """Ordered collection of uniquely named sheets."""
    sheets: List[Sheet] = field(default_factory=list)

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> Optional[Sheet]:
        """Exact, case-sensitive lookup."""
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None

    def lookup(self, name: str) -> Optional[Sheet]:
        """Exact lookup first, then the upper-cased name."""
        sheet = self.get_sheet(name)
        if sheet is None and name.upper() != name:
            sheet = self.get_sheet(name.upper())
        return sheet

    def add_sheet(self, name: str) -> Sheet:
        sheet = Sheet(name)
        self.sheets.append(sheet)
        return sheet

    def remove_sheet(self, sheet: Sheet) -> None:
        self.sheets.remove(sheet)


__all__ = ["Row", "Sheet", "Workbook"]
