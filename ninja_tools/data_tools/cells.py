"""
================================================================================
Spreadsheet Cell Model
================================================================================

Format-neutral representation of a single spreadsheet cell plus the
string rendering rules used by the tabular data store.

Every cell is tagged with a CellType. Rendering dispatches on that tag
through a renderer table, so adding a type means adding one function.

Rendering rules:
    - STRING   -> trimmed text
    - NUMERIC  -> "5" for integral values, "2.5" otherwise,
                  "M/D/YY" when the cell is date formatted
    - BOOLEAN  -> "true" / "false"
    - FORMULA  -> rendered from the cached result, never re-evaluated
    - ERROR    -> "FormulaError: #DIV/0!"
    - BLANK    -> ""

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from openpyxl.utils.datetime import from_excel


DATE_NUMBER_FORMAT = "m/d/yy"
FORMULA_ERROR_PREFIX = "FormulaError: "


class CellType(Enum):
    """Kinds of cell content the store understands."""
    STRING = "string"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    FORMULA = "formula"
    ERROR = "error"
    BLANK = "blank"


class CellStyle(Enum):
    """Styles the store applies itself and writes back to disk."""
    LINK = "link"
    HEADER = "header"


@dataclass
class Cell:
    """
    A single tagged cell value.

    Attributes:
        kind: Cell type tag
        value: str for STRING, int/float or datetime for NUMERIC,
               bool for BOOLEAN, formula text ("=SUM(A1:A3)") for FORMULA,
               error code ("#N/A") for ERROR, None for BLANK
        is_date: Numeric cell carries a date number format
        number_format: Number format code of numeric cells
        cached: Cached result of a FORMULA cell (any non-formula kind)
        hyperlink: Hyperlink target, if any
        style: Style applied by the store, if any
    """
    kind: CellType
    value: Any = None
    is_date: bool = False
    number_format: str = "General"
    cached: Optional["Cell"] = None
    hyperlink: Optional[str] = None
    style: Optional[CellStyle] = None

    @classmethod
    def blank(cls, style: Optional[CellStyle] = None) -> "Cell":
        return cls(CellType.BLANK, style=style)

    @classmethod
    def text(cls, value: str, **kwargs: Any) -> "Cell":
        return cls(CellType.STRING, value, **kwargs)

    @classmethod
    def from_python(cls, value: Any) -> "Cell":
        """
        Build a cell from a plain Python value.

        Strings always stay strings; "42" is stored as text, not as a number.

        Args:
            value: str, bool, int, float, date, datetime or None

        Returns:
            Tagged Cell

        Raises:
            TypeError: For unsupported value types
        """
        if value is None:
            return cls.blank()
        if isinstance(value, str):
            return cls.text(value)
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return cls(CellType.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(CellType.NUMERIC, value)
        if isinstance(value, datetime):
            return cls(CellType.NUMERIC, value, is_date=True, number_format=DATE_NUMBER_FORMAT)
        if isinstance(value, date):
            return cls(
                CellType.NUMERIC,
                datetime(value.year, value.month, value.day),
                is_date=True,
                number_format=DATE_NUMBER_FORMAT,
            )
        raise TypeError(f"Unsupported cell value type: {type(value).__name__}")


# ================================================================================
# Renderers
# ================================================================================

def format_short_date(value: Any) -> str:
    """
    Format a date as M/D/YY (no zero padding on month and day).

    Args:
        value: datetime/date, or an Excel serial number (1900 epoch)

    Returns:
        e.g. "3/7/24"
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = from_excel(value)
    return f"{value.month}/{value.day}/{value.year % 100:02d}"


def format_number(value: Any) -> str:
    """Render a number the way a spreadsheet user typed it."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def _render_string(cell: Cell) -> str:
    return str(cell.value).strip() if cell.value is not None else ""


def _render_numeric(cell: Cell) -> str:
    if cell.value is None:
        return ""
    if cell.is_date or isinstance(cell.value, (datetime, date)):
        return format_short_date(cell.value)
    return format_number(cell.value)


def _render_boolean(cell: Cell) -> str:
    return "true" if cell.value else "false"


def _render_formula(cell: Cell) -> str:
    cached = cell.cached
    if cached is None or cached.kind is CellType.FORMULA:
        return ""
    return render_cell(cached)


def _render_error(cell: Cell) -> str:
    return f"{FORMULA_ERROR_PREFIX}{cell.value}"


def _render_blank(cell: Cell) -> str:
    return ""


RENDERERS: Dict[CellType, Callable[[Cell], str]] = {
    CellType.STRING: _render_string,
    CellType.NUMERIC: _render_numeric,
    CellType.BOOLEAN: _render_boolean,
    CellType.FORMULA: _render_formula,
    CellType.ERROR: _render_error,
    CellType.BLANK: _render_blank,
}


def render_cell(cell: Optional[Cell]) -> str:
    """
    Render a cell to its string form.

    Missing cells render as an empty string. Exceptions raised while
    decoding the value are left to the caller.
    """
    if cell is None:
        return ""
    return RENDERERS[cell.kind](cell)


__all__ = [
    "Cell",
    "CellStyle",
    "CellType",
    "DATE_NUMBER_FORMAT",
    "FORMULA_ERROR_PREFIX",
    "RENDERERS",
    "format_number",
    "format_short_date",
    "render_cell",
]
