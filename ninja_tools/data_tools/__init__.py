"""
================================================================================
Spreadsheet Test Data Tools
================================================================================

Read/write access to .xlsx and .xls workbooks used as test data, plus
helpers that turn sheets into pytest parameters.

Usage:
    from ninja_tools.data_tools import TabularDataStore

    store = TabularDataStore("testdata/TutorialsNinjaTestData.xlsx")
    row = store.find_row("LoginData", "Email", "ann@x.com")
    password = store.get_cell("LoginData", "Password", row)

================================================================================
"""

from .cells import Cell, CellStyle, CellType, render_cell
from .data_provider import block_records, parametrize_from_sheet, sheet_records, sheet_rows
from .formats import UnsupportedFormatError, WorkbookWriteError, codec_for
from .tabular_store import DEFAULT_SHEET_NAME, ERROR_PREFIX, TabularDataStore

__all__ = [
    "Cell",
    "CellStyle",
    "CellType",
    "DEFAULT_SHEET_NAME",
    "ERROR_PREFIX",
    "TabularDataStore",
    "UnsupportedFormatError",
    "WorkbookWriteError",
    "block_records",
    "codec_for",
    "parametrize_from_sheet",
    "render_cell",
    "sheet_records",
    "sheet_rows",
]
