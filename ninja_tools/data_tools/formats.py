"""
================================================================================
Spreadsheet File Formats
================================================================================

Codecs translating between on-disk spreadsheets and the in-memory
Workbook model. The format is chosen by file extension only.

Supported formats:
    - .xlsx / .xlsm : zipped XML, read and written with openpyxl
    - .xls          : legacy BIFF, read with xlrd and written with xlwt

Notes:
    - Formula cells keep their formula text and the cached result. openpyxl
      does not compute results, so rewritten .xlsx files carry formulas only
      until the next save from a spreadsheet application.
    - xlwt has no hyperlink records; .xls link cells keep their text and link
      style on disk while the target lives in memory only.

================================================================================
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import xlrd
import xlwt
from loguru import logger
from openpyxl import Workbook as XlsxWorkbook
from openpyxl import load_workbook
from openpyxl.cell.cell import Cell as XlsxCell
from openpyxl.styles import Font, PatternFill

from .cells import DATE_NUMBER_FORMAT, Cell, CellStyle, CellType
from .workbook import Workbook


# Excel "Grey 40%" and "Blue"
HEADER_FILL_COLOR = "FF969696"
LINK_FONT_COLOR = "FF0000FF"

# Text format given to blank cells so their position survives a reload
BLANK_NUMBER_FORMAT = "@"

# Day zero for time-only values (Excel renders them on 12/31/1899)
_TIME_ONLY_DAY = date(1899, 12, 31)


class UnsupportedFormatError(Exception):
    """Raised when a file extension maps to no known spreadsheet format."""
    pass


class WorkbookWriteError(Exception):
    """Raised when a workbook cannot be serialized."""
    pass


def _cell_from_value(
    value: Any,
    *,
    is_date: bool = False,
    number_format: str = "General",
    is_error: bool = False,
) -> Optional[Cell]:
    """Build a plain (non-formula) cell from a decoded value."""
    if value is None:
        return None
    if is_error:
        return Cell(CellType.ERROR, str(value))
    if isinstance(value, bool):
        return Cell(CellType.BOOLEAN, value)
    if isinstance(value, time):
        value = datetime.combine(_TIME_ONLY_DAY, value)
    if isinstance(value, timedelta):
        return Cell(CellType.NUMERIC, value.total_seconds() / 86400, is_date=True, number_format=number_format)
    if isinstance(value, (datetime, date)):
        return Cell(CellType.NUMERIC, value, is_date=True, number_format=number_format)
    if isinstance(value, (int, float)):
        return Cell(CellType.NUMERIC, value, is_date=is_date, number_format=number_format)
    return Cell(CellType.STRING, str(value))


# ================================================================================
# XLSX (openpyxl)
# ================================================================================

class XlsxCodec:
    """Zipped XML workbooks via openpyxl."""

    name = "xlsx"

    def load(self, path: Path) -> Workbook:
        # Two loads: formulas from one, cached results from the other
        formula_wb = load_workbook(filename=path, data_only=False)
        values_wb = load_workbook(filename=path, data_only=True)

        workbook = Workbook()
        for ws in formula_wb.worksheets:
            cached_ws = values_wb[ws.title]
            sheet = workbook.add_sheet(ws.title)
            for row in ws.iter_rows():
                for xl_cell in row:
                    cell = self._read_cell(xl_cell, cached_ws)
                    if cell is not None:
                        sheet.put(xl_cell.row - 1, xl_cell.column - 1, cell)
        logger.debug(f"Decoded xlsx workbook {path.name}: sheets={workbook.sheet_names}")
        return workbook

    def _read_cell(self, xl_cell: XlsxCell, cached_ws: Any) -> Optional[Cell]:
        hyperlink = xl_cell.hyperlink.target if xl_cell.hyperlink is not None else None
        style = self._detect_style(xl_cell, hyperlink)
        value = xl_cell.value

        if value is None:
            if not xl_cell.has_style and hyperlink is None:
                return None
            return Cell(CellType.BLANK, hyperlink=hyperlink, style=style)

        if xl_cell.data_type == "f":
            cached_cell = cached_ws.cell(row=xl_cell.row, column=xl_cell.column)
            cached = _cell_from_value(
                cached_cell.value,
                is_date=cached_cell.is_date,
                number_format=cached_cell.number_format,
                is_error=cached_cell.data_type == "e",
            )
            # ArrayFormula / DataTableFormula expose their text separately
            formula = getattr(value, "text", None) or str(value)
            return Cell(
                CellType.FORMULA,
                formula,
                number_format=xl_cell.number_format,
                cached=cached,
                hyperlink=hyperlink,
                style=style,
            )

        cell = _cell_from_value(
            value,
            is_date=xl_cell.is_date,
            number_format=xl_cell.number_format,
            is_error=xl_cell.data_type == "e",
        )
        cell.hyperlink = hyperlink
        cell.style = style
        return cell

    @staticmethod
    def _detect_style(xl_cell: XlsxCell, hyperlink: Optional[str]) -> Optional[CellStyle]:
        if hyperlink is not None:
            return CellStyle.LINK
        if xl_cell.has_style and xl_cell.fill is not None and xl_cell.fill.fill_type == "solid":
            return CellStyle.HEADER
        return None

    def save(self, workbook: Workbook, path: Path) -> None:
        if not workbook.sheets:
            raise WorkbookWriteError("A workbook needs at least one sheet")

        xl_wb = XlsxWorkbook()
        xl_wb.remove(xl_wb.active)
        for sheet in workbook.sheets:
            ws = xl_wb.create_sheet(title=sheet.name)
            for row_idx, col_idx, cell in sheet.iter_cells():
                self._write_cell(ws.cell(row=row_idx + 1, column=col_idx + 1), cell)
        xl_wb.save(path)

    @staticmethod
    def _write_cell(xl_cell: XlsxCell, cell: Cell) -> None:
        kind = cell.kind
        if kind is CellType.STRING:
            xl_cell.value = cell.value
            # Keep text that looks like a formula as text
            xl_cell.data_type = "s"
        elif kind is CellType.NUMERIC:
            xl_cell.value = cell.value
            number_format = cell.number_format
            if cell.is_date and number_format == "General":
                number_format = DATE_NUMBER_FORMAT
            xl_cell.number_format = number_format
        elif kind is CellType.BOOLEAN:
            xl_cell.value = bool(cell.value)
        elif kind is CellType.FORMULA:
            formula = cell.value if cell.value.startswith("=") else f"={cell.value}"
            xl_cell.value = formula
            xl_cell.number_format = cell.number_format
        elif kind is CellType.ERROR:
            xl_cell.value = cell.value
            xl_cell.data_type = "e"
        elif kind is CellType.BLANK:
            # Unstyled empty cells are dropped on load; the text format keeps them
            xl_cell.number_format = BLANK_NUMBER_FORMAT

        if cell.hyperlink and kind is not CellType.BLANK:
            xl_cell.hyperlink = cell.hyperlink
        if cell.style is CellStyle.LINK:
            xl_cell.font = Font(underline="single", color=LINK_FONT_COLOR)
        elif cell.style is CellStyle.HEADER:
            xl_cell.fill = PatternFill(
                fill_type="solid",
                start_color=HEADER_FILL_COLOR,
                end_color=HEADER_FILL_COLOR,
            )


# ================================================================================
# XLS (xlrd / xlwt)
# ================================================================================

class XlsCodec:
    """Legacy BIFF workbooks: xlrd to read, xlwt to write."""

    name = "xls"

    LINK_STYLE = "font: underline single, colour blue"
    HEADER_STYLE = "pattern: pattern solid, fore_colour gray40"

    def load(self, path: Path) -> Workbook:
        book = xlrd.open_workbook(str(path), formatting_info=True)
        workbook = Workbook()
        for xl_sheet in book.sheets():
            sheet = workbook.add_sheet(xl_sheet.name)
            links = xl_sheet.hyperlink_map
            for row_idx in range(xl_sheet.nrows):
                for col_idx in range(xl_sheet.row_len(row_idx)):
                    link = links.get((row_idx, col_idx))
                    cell = self._read_cell(
                        book,
                        xl_sheet.cell(row_idx, col_idx),
                        link.url_or_path if link is not None else None,
                    )
                    if cell is not None:
                        sheet.put(row_idx, col_idx, cell)
        logger.debug(f"Decoded xls workbook {path.name}: sheets={workbook.sheet_names}")
        return workbook

    def _read_cell(self, book: Any, xl_cell: Any, hyperlink: Optional[str]) -> Optional[Cell]:
        ctype = xl_cell.ctype
        if ctype == xlrd.XL_CELL_EMPTY:
            return None

        number_format, filled = self._xf_details(book, xl_cell.xf_index)
        if hyperlink is not None:
            style = CellStyle.LINK
        elif filled:
            style = CellStyle.HEADER
        else:
            style = None

        if ctype == xlrd.XL_CELL_TEXT:
            cell = Cell(CellType.STRING, xl_cell.value)
        elif ctype == xlrd.XL_CELL_NUMBER:
            cell = Cell(CellType.NUMERIC, xl_cell.value, number_format=number_format)
        elif ctype == xlrd.XL_CELL_DATE:
            try:
                value = xlrd.xldate_as_datetime(xl_cell.value, book.datemode)
            except xlrd.XLDateError as e:
                logger.debug(f"Keeping raw date serial {xl_cell.value}: {e}")
                value = xl_cell.value
            cell = Cell(CellType.NUMERIC, value, is_date=True, number_format=number_format)
        elif ctype == xlrd.XL_CELL_BOOLEAN:
            cell = Cell(CellType.BOOLEAN, bool(xl_cell.value))
        elif ctype == xlrd.XL_CELL_ERROR:
            code = xlrd.error_text_from_code.get(xl_cell.value, f"#ERR{xl_cell.value}")
            cell = Cell(CellType.ERROR, code)
        else:
            cell = Cell(CellType.BLANK)

        cell.hyperlink = hyperlink
        cell.style = style
        return cell

    @staticmethod
    def _xf_details(book: Any, xf_index: Optional[int]) -> Tuple[str, bool]:
        """Return (number format, has solid fill) for an XF record index."""
        if xf_index is None or xf_index >= len(book.xf_list):
            return "General", False
        xf = book.xf_list[xf_index]
        fmt = book.format_map.get(xf.format_key)
        number_format = fmt.format_str if fmt is not None else "General"
        filled = xf.background.fill_pattern == 1
        return number_format, filled

    def save(self, workbook: Workbook, path: Path) -> None:
        if not workbook.sheets:
            raise WorkbookWriteError("A workbook needs at least one sheet")

        book = xlwt.Workbook(encoding="utf-8")
        styles: Dict[Tuple[Optional[CellStyle], Optional[str]], Any] = {}
        for sheet in workbook.sheets:
            ws = book.add_sheet(sheet.name, cell_overwrite_ok=True)
            for row_idx, col_idx, cell in sheet.iter_cells():
                self._write_cell(ws, row_idx, col_idx, cell, styles)
        book.save(str(path))

    def _style_for(self, cell: Cell, styles: Dict) -> Any:
        # xlwt caps the number of XF records, so share style objects
        number_format = None
        if cell.kind is CellType.NUMERIC and (cell.is_date or cell.number_format != "General"):
            number_format = cell.number_format
            if cell.is_date and number_format == "General":
                number_format = DATE_NUMBER_FORMAT
        key = (cell.style, number_format)
        if key not in styles:
            spec = ""
            if cell.style is CellStyle.LINK:
                spec = self.LINK_STYLE
            elif cell.style is CellStyle.HEADER:
                spec = self.HEADER_STYLE
            styles[key] = xlwt.easyxf(spec, num_format_str=number_format)
        return styles[key]

    def _write_cell(self, ws: Any, row_idx: int, col_idx: int, cell: Cell, styles: Dict) -> None:
        if cell.kind is CellType.FORMULA:
            # No formula engine here: persist the cached result
            cached = cell.cached or Cell(CellType.BLANK)
            cell = Cell(
                cached.kind,
                cached.value,
                is_date=cached.is_date,
                number_format=cached.number_format,
                hyperlink=cell.hyperlink,
                style=cell.style,
            )

        style = self._style_for(cell, styles)
        if cell.kind is CellType.ERROR:
            ws.row(row_idx).set_cell_error(col_idx, cell.value, style)
        elif cell.kind is CellType.BLANK:
            ws.write(row_idx, col_idx, None, style)
        elif cell.kind is CellType.BOOLEAN:
            ws.write(row_idx, col_idx, bool(cell.value), style)
        else:
            ws.write(row_idx, col_idx, cell.value, style)


# ================================================================================
# Format Registry
# ================================================================================

CODECS: Dict[str, Union[XlsxCodec, XlsCodec]] = {
    ".xlsx": XlsxCodec(),
    ".xlsm": XlsxCodec(),
    ".xls": XlsCodec(),
}


def codec_for(path: Union[str, Path]) -> Union[XlsxCodec, XlsCodec]:
    """
    Pick the codec for a file path by its extension (case-insensitive).

    Raises:
        UnsupportedFormatError: For any other extension
    """
    suffix = Path(path).suffix.lower()
    codec = CODECS.get(suffix)
    if codec is None:
        raise UnsupportedFormatError(f"Unsupported file extension: '{suffix or path}'")
    return codec


__all__ = [
    "CODECS",
    "UnsupportedFormatError",
    "WorkbookWriteError",
    "XlsCodec",
    "XlsxCodec",
    "codec_for",
]
