"""
================================================================================
Tabular Data Store
================================================================================

Sheet-qualified, header-addressed read/write access to a spreadsheet file
used as test data (.xlsx or .xls, chosen by extension).

Addressing:
    - Row 0 of every sheet is the header row; its values are column names.
    - Row numbers at this API are 1-based and count data rows below the
      header, so row 1 is the first row under the header.
    - Columns are addressed by header name (case-insensitive, trimmed) or
      by 1-based position.

Failure semantics:
    Nothing raises. Lookups that do not apply return "", 0, -1 or False,
    file and format problems are logged and turned into the same results.
    Unexpected decode failures while reading a cell come back as a string
    starting with ERROR_PREFIX.

Persistence:
    The whole workbook is held in memory and rewritten to the original
    path after every successful mutation. The rewrite goes to a temporary
    file that replaces the original only once complete. A mutation whose
    rewrite fails is rolled back in memory. Use `batch()` to group several
    mutations into a single rewrite.

Usage:
    store = TabularDataStore("testdata/TutorialsNinjaTestData.xlsx")
    email = store.get_cell("LoginData", "Email", 1)
    store.set_cell("LoginData", "Result", 1, "PASS")

================================================================================
"""

from __future__ import annotations

import copy
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from loguru import logger

from .cells import Cell, CellStyle, CellType, render_cell
from .formats import codec_for
from .workbook import Sheet, Workbook


ERROR_PREFIX = "Error: "
DEFAULT_SHEET_NAME = "Sheet1"


def as_lookup_text(value: Any) -> str:
    """
    Render a lookup value the way a cell holding it renders, so
    `find_row(sheet, "Age", 30)` matches a cell showing "30".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return render_cell(Cell.from_python(value))
    except TypeError:
        return str(value)


class TabularDataStore:
    """
    Spreadsheet-backed test data store.

    The store owns its workbook for its whole lifetime. Callers construct
    it explicitly and pass it where it is needed; there is no global handle.
    """

    ERROR_PREFIX = ERROR_PREFIX

    def __init__(self, path: Union[str, Path], create_if_missing: bool = False):
        """
        Open a spreadsheet file.

        A missing, unreadable or unsupported file is logged and leaves the
        store unloaded: reads behave as "not found" and writes fail.

        Args:
            path: Absolute path, or a path relative to the working directory
            create_if_missing: Start an empty workbook (one sheet named
                               "Sheet1") when the file does not exist yet
        """
        self.path = Path(path).expanduser().resolve()
        self._workbook: Optional[Workbook] = None
        self._codec = None
        self._batch_depth = 0
        self._batch_snapshot: Optional[Workbook] = None
        self._dirty = False

        logger.info(f"Opening tabular data store: {self.path}")
        try:
            self._codec = codec_for(self.path)
            if create_if_missing and not self.path.exists():
                self._workbook = Workbook()
                self._workbook.add_sheet(DEFAULT_SHEET_NAME)
                logger.info(f"Started new {self._codec.name} workbook for {self.path}")
            else:
                self._workbook = self._codec.load(self.path)
                logger.info(f"Loaded {self._codec.name} workbook with sheets {self._workbook.sheet_names}")
        except Exception as e:
            self._workbook = None
            logger.error(f"Failed to open workbook {self.path}: {e}")

    def __repr__(self) -> str:
        return f"TabularDataStore(path={str(self.path)!r}, loaded={self.is_loaded})"

    # ============================================================================
    # Workbook level
    # ============================================================================

    @property
    def is_loaded(self) -> bool:
        """Whether the workbook was opened successfully."""
        return self._workbook is not None

    @property
    def sheet_names(self) -> List[str]:
        return self._workbook.sheet_names if self._workbook else []

    @property
    def default_sheet(self) -> Optional[str]:
        """Name of the first sheet in file order."""
        names = self.sheet_names
        return names[0] if names else None

    def sheet_exists(self, name: str) -> bool:
        """Check for a sheet by exact name, then by its upper-cased name."""
        if self._workbook is None or name is None:
            return False
        exists = self._workbook.lookup(name) is not None
        logger.debug(f"Sheet '{name}' exists: {exists}")
        return exists

    def save(self) -> bool:
        """
        Rewrite the whole workbook to its path.

        Returns:
            True when the file was written
        """
        if self._workbook is None or self._codec is None:
            logger.warning(f"No workbook loaded for {self.path}, nothing to save")
            return False
        try:
            self._write_file()
        except Exception as e:
            logger.error(f"Failed to write workbook {self.path}: {e}")
            return False
        self._dirty = False
        logger.debug(f"Workbook written to {self.path}")
        return True

    def _write_file(self) -> None:
        """Serialize into a sibling temp file, then swap it in place."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.stem}-",
            suffix=self.path.suffix,
        )
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            self._codec.save(self._workbook, tmp_path)
            os.replace(tmp_path, self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    @contextmanager
    def batch(self) -> Iterator["TabularDataStore"]:
        """
        Group mutations into a single rewrite.

        Inside the block mutations only change the in-memory workbook;
        the file is written once when the outermost block exits.

        Example:
            with store.batch():
                store.set_cell("Results", "Status", 1, "PASS")
                store.set_cell("Results", "Status", 2, "FAIL")
        """
        if self._batch_depth == 0:
            self._batch_snapshot = copy.deepcopy(self._workbook)
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                snapshot, self._batch_snapshot = self._batch_snapshot, None
                if self._dirty and not self.save():
                    self._rollback(snapshot)

    def _snapshot(self) -> Optional[Workbook]:
        """Copy of the workbook to restore if the coming mutation cannot be saved."""
        if self._batch_depth:
            # The enclosing batch holds the snapshot
            return None
        return copy.deepcopy(self._workbook)

    def _commit(self, snapshot: Optional[Workbook]) -> bool:
        self._dirty = True
        if self._batch_depth:
            return True
        if self.save():
            return True
        self._rollback(snapshot)
        return False

    def _rollback(self, snapshot: Optional[Workbook]) -> None:
        self._workbook = snapshot
        self._dirty = False
        logger.warning(f"Unsaved changes to {self.path} rolled back")

    def _sheet(self, name: Optional[str]) -> Optional[Sheet]:
        if self._workbook is None:
            return None
        if name is None:
            return self._workbook.sheets[0] if self._workbook.sheets else None
        return self._workbook.lookup(name)

    # ============================================================================
    # Reads
    # ============================================================================

    def row_count(self, sheet: Optional[str] = None) -> int:
        """
        Number of data rows: index of the last physically present row.

        Returns 0 for a missing sheet, an empty sheet or a header-only sheet.
        """
        target = self._sheet(sheet)
        if target is None:
            logger.warning(f"Sheet '{sheet}' not found. Returning row count 0.")
            return 0
        count = max(target.last_row_index, 0)
        logger.debug(f"Sheet '{target.name}' row count: {count}")
        return count

    def column_count(self, sheet: Optional[str] = None) -> int:
        """
        Number of header positions (last header cell index + 1).

        Returns -1 when the sheet or its header row is missing and 0 when
        the header row exists but holds no cells.
        """
        target = self._sheet(sheet)
        if target is None:
            logger.warning(f"Sheet '{sheet}' not found. Returning column count -1.")
            return -1
        count = target.header_width()
        if count == -1:
            logger.warning(f"Header row not found in sheet '{target.name}'. Returning column count -1.")
        return count

    def headers(self, sheet: Optional[str] = None) -> List[str]:
        """
        Rendered header names by position, "" for empty positions.

        Returns an empty list when the sheet or its header row is missing.
        """
        target = self._sheet(sheet)
        if target is None or target.header is None:
            return []
        return [render_cell(target.get(0, col_idx)).strip() for col_idx in range(target.header_width())]

    def get_cell(self, sheet: Optional[str], column: Union[str, int], row: int) -> str:
        """
        Read a cell as a string.

        Args:
            sheet: Sheet name (None for the default sheet)
            column: Header name, or 1-based column position
            row: 1-based data row number

        Returns:
            Rendered value, "" when anything along the way is missing, or
            ERROR_PREFIX + message on an unexpected decode failure
        """
        try:
            if row is None or row <= 0:
                logger.warning(f"Invalid row number: {row}. Must be > 0.")
                return ""
            target = self._sheet(sheet)
            if target is None:
                logger.warning(f"Sheet '{sheet}' not found.")
                return ""
            col_idx = self._resolve_column(target, column)
            if col_idx < 0:
                return ""
            cell = target.get(row, col_idx)
            if cell is None:
                logger.debug(f"No cell at row {row}, column '{column}' in sheet '{target.name}'")
                return ""
            value = render_cell(cell)
        except Exception as e:
            logger.error(f"Failed to read cell (sheet={sheet}, column={column}, row={row}): {e}")
            return f"{ERROR_PREFIX}{e}"
        logger.debug(f"Read '{value}' from sheet '{target.name}', column '{column}', row {row}")
        return value

    def find_row(self, sheet: Optional[str], column_name: str, value: Any) -> int:
        """
        Find the first data row whose cell in `column_name` equals `value`.

        The comparison is an exact, case-insensitive match on the rendered
        string. Non-string values (30, True, a date) are rendered first.

        Returns:
            1-based row number, or -1 when nothing matches
        """
        wanted = as_lookup_text(value).lower()
        for row in range(1, self.row_count(sheet) + 1):
            if self.get_cell(sheet, column_name, row).lower() == wanted:
                logger.info(f"Found '{value}' in column '{column_name}' at row {row}")
                return row
        logger.warning(f"Value '{value}' not found in column '{column_name}' of sheet '{sheet}'")
        return -1

    def _resolve_column(self, sheet: Sheet, column: Union[str, int]) -> int:
        """Translate a header name or 1-based position into a column index."""
        if isinstance(column, int) and not isinstance(column, bool):
            if column <= 0:
                logger.warning(f"Invalid column number: {column}. Must be > 0.")
                return -1
            return column - 1
        if sheet.header is None:
            logger.warning(f"Header row not found in sheet '{sheet.name}'.")
            return -1
        col_idx = sheet.find_column(str(column))
        if col_idx < 0:
            logger.warning(f"Column '{column}' not found in sheet '{sheet.name}'.")
        return col_idx

    # ============================================================================
    # Writes
    # ============================================================================

    def set_cell(self, sheet: str, column_name: str, row: int, value: Any) -> bool:
        """
        Write a value into a data row, creating the column and row as needed.

        A column name missing from the header is appended as the next header
        cell. Strings are stored as text; bool, int, float, date/datetime and
        None are stored with their matching cell type.

        Returns:
            True when the value was written and the file rewritten
        """
        logger.info(f"Setting cell: sheet={sheet}, column={column_name}, row={row}, value={value!r}")
        return self._write(sheet, column_name, row, lambda: Cell.from_python(value))

    def set_cell_with_link(self, sheet: str, column_name: str, row: int, text: str, url: str) -> bool:
        """Write display text with a hyperlink to `url` (underlined, blue)."""
        logger.info(f"Setting link cell: sheet={sheet}, column={column_name}, row={row}, text={text!r}, url={url}")
        return self._write(
            sheet,
            column_name,
            row,
            lambda: Cell(CellType.STRING, text, hyperlink=url, style=CellStyle.LINK),
        )

    def _write(self, sheet: str, column_name: str, row: int, make_cell) -> bool:
        if row is None or row <= 0:
            logger.warning(f"Invalid row number: {row}. Must be > 0.")
            return False
        target = self._sheet(sheet) if sheet is not None else None
        if target is None:
            logger.warning(f"Sheet '{sheet}' not found.")
            return False
        snapshot = self._snapshot()
        try:
            cell = make_cell()
            col_idx = target.find_column(column_name)
            if col_idx < 0:
                col_idx = max(target.header_width(), 0)
                target.put(0, col_idx, Cell.text(column_name))
                logger.debug(f"Column '{column_name}' not found, created at index {col_idx}")
            target.put(row, col_idx, cell)
        except Exception as e:
            logger.error(f"Failed to set cell (sheet={sheet}, column={column_name}, row={row}): {e}")
            if snapshot is not None:
                self._workbook = snapshot
            return False
        return self._commit(snapshot)

    def add_sheet(self, name: str) -> bool:
        """Append a new empty sheet; fails when that exact name exists."""
        logger.info(f"Adding sheet '{name}'")
        if self._workbook is None:
            logger.warning(f"No workbook loaded for {self.path}. Cannot add sheet.")
            return False
        if not name:
            logger.warning("Sheet name must not be empty.")
            return False
        if self._workbook.get_sheet(name) is not None:
            logger.warning(f"Sheet '{name}' already exists. Cannot add.")
            return False
        snapshot = self._snapshot()
        self._workbook.add_sheet(name)
        return self._commit(snapshot)

    def remove_sheet(self, name: str) -> bool:
        logger.info(f"Removing sheet '{name}'")
        target = self._sheet(name) if name is not None else None
        if target is None:
            logger.warning(f"Sheet '{name}' not found. Cannot remove.")
            return False
        snapshot = self._snapshot()
        self._workbook.remove_sheet(target)
        return self._commit(snapshot)

    def add_column(self, sheet: str, name: str) -> bool:
        """
        Append a header cell with a grey background.

        Fails when the sheet is missing or the header already has a column
        with that name (case-insensitive, trimmed).
        """
        logger.info(f"Adding column '{name}' to sheet '{sheet}'")
        target = self._sheet(sheet) if sheet is not None else None
        if target is None:
            logger.warning(f"Sheet '{sheet}' not found. Cannot add column.")
            return False
        if target.find_column(name) >= 0:
            logger.warning(f"Column '{name}' already exists in sheet '{target.name}'. Cannot add.")
            return False
        snapshot = self._snapshot()
        col_idx = max(target.header_width(), 0)
        target.put(0, col_idx, Cell.text(name, style=CellStyle.HEADER))
        return self._commit(snapshot)

    def remove_column(self, sheet: str, index: int) -> bool:
        """
        Clear the column at 1-based `index` in every row.

        Cells to the right are not shifted left. The header keeps an empty
        placeholder at that position, so the column count does not change.
        """
        logger.info(f"Removing column {index} from sheet '{sheet}'")
        if index is None or index <= 0:
            logger.warning(f"Invalid column number: {index}. Must be > 0.")
            return False
        target = self._sheet(sheet) if sheet is not None else None
        if target is None:
            logger.warning(f"Sheet '{sheet}' does not exist. Cannot remove column.")
            return False
        snapshot = self._snapshot()
        col_idx = index - 1
        for row_idx in sorted(target.rows):
            if row_idx == 0:
                header_cell = target.get(0, col_idx)
                if header_cell is not None:
                    target.put(0, col_idx, Cell.blank(style=header_cell.style))
            elif target.remove(row_idx, col_idx):
                logger.debug(f"Removed cell at row {row_idx}, column {index} in sheet '{target.name}'")
        return self._commit(snapshot)

    def add_hyperlink(self, sheet: str, column_name: str, key_value: str, url: str, text: str) -> bool:
        """
        Link a cell in the row whose first column equals `key_value`.

        Typical use is attaching a failure screenshot to a test case row.
        """
        logger.info(f"Adding hyperlink: sheet={sheet}, column={column_name}, key={key_value}, url={url}")
        if not self.sheet_exists(sheet):
            logger.warning(f"Sheet '{sheet}' does not exist. Cannot add hyperlink.")
            return False
        wanted = as_lookup_text(key_value).lower()
        for row in range(1, self.row_count(sheet) + 1):
            if self.get_cell(sheet, 1, row).lower() == wanted:
                return self.set_cell_with_link(sheet, column_name, row, text, url)
        logger.warning(f"Key '{key_value}' not found in sheet '{sheet}'. Hyperlink not added.")
        return False


__all__ = ["DEFAULT_SHEET_NAME", "ERROR_PREFIX", "TabularDataStore"]
