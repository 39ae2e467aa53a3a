from datetime import datetime

import pytest
import xlrd
import xlwt

from ninja_tools.data_tools import TabularDataStore


@pytest.fixture
def users_xls(tmp_path):
    book = xlwt.Workbook()
    ws = book.add_sheet("Users")
    for col, name in enumerate(["Name", "Email", "Age", "Joined", "Active"]):
        ws.write(0, col, name)
    ws.write(1, 0, "Ann")
    ws.write(1, 1, "ann@x.com")
    ws.write(1, 2, 42)
    ws.write(1, 3, datetime(2024, 3, 7), xlwt.easyxf(num_format_str="m/d/yy"))
    ws.write(1, 4, True)
    path = tmp_path / "users.xls"
    book.save(str(path))
    return path


def test_reads_legacy_workbook(users_xls):
    store = TabularDataStore(users_xls)

    assert store.is_loaded
    assert store.sheet_names == ["Users"]
    assert store.row_count("Users") == 1
    assert store.column_count("Users") == 5
    assert store.get_cell("Users", "Email", 1) == "ann@x.com"
    assert store.get_cell("Users", "Age", 1) == "42"
    assert store.get_cell("Users", "Joined", 1) == "3/7/24"
    assert store.get_cell("Users", "Active", 1) == "true"
    assert store.find_row("Users", "Name", "ANN") == 1


def test_writes_legacy_workbook(users_xls):
    store = TabularDataStore(users_xls)

    assert store.set_cell("Users", "Status", 1, "PASS")
    assert store.set_cell("Users", "Age", 1, 43)

    reopened = TabularDataStore(users_xls)
    assert reopened.get_cell("Users", "Status", 1) == "PASS"
    assert reopened.get_cell("Users", "Age", 1) == "43"
    assert reopened.get_cell("Users", "Joined", 1) == "3/7/24"
    assert reopened.get_cell("Users", "Active", 1) == "true"


def test_add_column_header_has_solid_fill(users_xls):
    store = TabularDataStore(users_xls)

    assert store.add_column("Users", "Result")

    book = xlrd.open_workbook(str(users_xls), formatting_info=True)
    sheet = book.sheet_by_name("Users")
    assert sheet.cell_value(0, 5) == "Result"
    xf = book.xf_list[sheet.cell_xf_index(0, 5)]
    assert xf.background.fill_pattern == 1


def test_link_cells_keep_text_in_legacy_format(users_xls):
    store = TabularDataStore(users_xls)

    assert store.add_hyperlink("Users", "Screenshot", "ann", "file:///tmp/shot.png", "shot.png")

    assert TabularDataStore(users_xls).get_cell("Users", "Screenshot", 1) == "shot.png"


def test_sheet_management_in_legacy_format(users_xls):
    store = TabularDataStore(users_xls)

    assert store.add_sheet("Results")
    assert store.remove_sheet("Users")
    assert TabularDataStore(users_xls).sheet_names == ["Results"]


def test_create_if_missing_legacy_workbook(tmp_path):
    path = tmp_path / "new.xls"
    store = TabularDataStore(path, create_if_missing=True)

    assert store.set_cell("Sheet1", "Name", 1, "Ann")
    assert TabularDataStore(path).get_cell(None, "Name", 1) == "Ann"


def test_removing_last_column_keeps_column_count_in_legacy_format(users_xls):
    store = TabularDataStore(users_xls)

    assert store.remove_column("Users", 5) is True

    reopened = TabularDataStore(users_xls)
    assert reopened.column_count("Users") == 5
    assert reopened.get_cell("Users", 5, 1) == ""
    assert reopened.get_cell("Users", "Joined", 1) == "3/7/24"
