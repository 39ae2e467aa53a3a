"""
================================================================================
Spreadsheet Data Provider
================================================================================

Turns sheets of a TabularDataStore into test data for pytest
parametrization.

Two layouts are supported:

    Table layout (one sheet per test):
        | Email         | Password | Warning                |
        | bad@x.com     | nope     | Warning: No match ...  |

    Block layout (several tests stacked in one sheet, below the header):
        | (sheet header)                     |
        | LoginTest                          |
        | Email     | Password | Warning     |
        | bad@x.com | nope     | Warning ... |
        | (empty row ends the block)         |

Example:
    CASES = parametrize_from_sheet(DATA_FILE, "LoginData", ["email", "password", "warning"])

    @pytest.mark.parametrize("email,password,warning", CASES)
    def test_invalid_login(email, password, warning):
        ...

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest
from loguru import logger

from .tabular_store import TabularDataStore


def sheet_records(store: TabularDataStore, sheet: str) -> List[Dict[str, str]]:
    """
    Read a table-layout sheet as a list of {header: value} dicts.

    Rows whose cells are all empty are skipped.
    """
    width = store.column_count(sheet)
    if width <= 0:
        logger.warning(f"Sheet '{sheet}' has no header row, no records loaded")
        return []

    headers = list(enumerate(store.headers(sheet), start=1))
    records = []
    for row in range(1, store.row_count(sheet) + 1):
        record = {name: store.get_cell(sheet, col, row) for col, name in headers if name}
        if any(record.values()):
            records.append(record)

    logger.info(f"Loaded {len(records)} records from sheet '{sheet}'")
    return records


def sheet_rows(
    store: TabularDataStore,
    sheet: str,
    columns: Optional[Sequence[Union[str, int]]] = None,
) -> List[Tuple[str, ...]]:
    """
    Read data rows as tuples.

    Args:
        store: Open data store
        sheet: Sheet name
        columns: Header names or 1-based positions to pick, in order.
                 Defaults to every header position.

    Returns:
        One tuple per non-empty data row
    """
    if columns is None:
        width = store.column_count(sheet)
        if width <= 0:
            logger.warning(f"Sheet '{sheet}' has no header row, no rows loaded")
            return []
        columns = list(range(1, width + 1))

    rows = []
    for row in range(1, store.row_count(sheet) + 1):
        values = tuple(store.get_cell(sheet, column, row) for column in columns)
        if any(values):
            rows.append(values)

    logger.info(f"Loaded {len(rows)} rows from sheet '{sheet}'")
    return rows


def block_records(store: TabularDataStore, sheet: str, test_name: str) -> List[Dict[str, str]]:
    """
    Read the data block that belongs to one test in a block-layout sheet.

    The first row whose first column equals `test_name` (case-sensitive)
    starts the block; the next row holds the column names and data rows
    follow until the first column is empty.

    Returns:
        List of {column name: value} dicts, empty when the test is not found
    """
    total_rows = store.row_count(sheet)
    start = next(
        (row for row in range(1, total_rows + 1) if store.get_cell(sheet, 1, row) == test_name),
        None,
    )
    if start is None:
        logger.warning(f"Test '{test_name}' not found in sheet '{sheet}'")
        return []

    names_row = start + 1
    names = []
    col = 1
    while store.get_cell(sheet, col, names_row) != "":
        names.append(store.get_cell(sheet, col, names_row))
        col += 1

    records = []
    row = start + 2
    while row <= total_rows and store.get_cell(sheet, 1, row) != "":
        records.append({name: store.get_cell(sheet, idx, row) for idx, name in enumerate(names, start=1)})
        row += 1

    logger.info(f"Loaded {len(records)} data sets for test '{test_name}' from sheet '{sheet}'")
    return records


def parametrize_from_sheet(
    path: Union[str, Path],
    sheet: str,
    argnames: Optional[Sequence[str]] = None,
    id_column: Optional[str] = None,
) -> list:
    """
    Build `pytest.param` objects from a table-layout sheet.

    Args:
        path: Spreadsheet file path
        sheet: Sheet name
        argnames: Header names to pick, in order. Defaults to all columns.
        id_column: Header whose value names each case (defaults to row number)

    Returns:
        List of pytest.param, empty when the workbook cannot be read
    """
    store = TabularDataStore(path)
    if not store.is_loaded:
        logger.error(f"Cannot build parameters: workbook {path} not loaded")
        return []

    params = []
    for number, record in enumerate(sheet_records(store, sheet), start=1):
        lowered = {key.strip().lower(): value for key, value in record.items()}
        names = argnames or list(record)
        values = [lowered.get(name.strip().lower(), "") for name in names]
        case_id = lowered.get(id_column.strip().lower(), "") if id_column else ""
        params.append(pytest.param(*values, id=case_id or f"{sheet}-row{number}"))
    return params


__all__ = [
    "parametrize_from_sheet",
    "sheet_records",
    "sheet_rows",
    "block_records",
]
