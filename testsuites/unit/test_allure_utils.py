from unittest.mock import MagicMock

import pytest
from loguru import logger
from openpyxl import load_workbook

from ninja_tools.data_tools import TabularDataStore
from ninja_tools.report_tools import allure_utils
from ninja_tools.report_tools import (
    attach_json,
    attach_screenshot,
    log_test_outcome,
    write_environment,
    write_spreadsheet_result,
)


@pytest.fixture
def attach(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(allure_utils.allure, "attach", mock)
    return mock


@pytest.fixture
def log_records():
    records = []
    sink_id = logger.add(lambda message: records.append((message.record["level"].name, message.record["message"])))
    yield records
    logger.remove(sink_id)


def test_attach_json_serializes_data(attach):
    attach_json({"email": "a@x.com"}, name="Payload")

    body = attach.call_args.args[0]
    assert '"email": "a@x.com"' in body
    assert attach.call_args.kwargs["name"] == "Payload"


def test_attach_screenshot_only_attaches_existing_files(attach, tmp_path):
    shot = tmp_path / "shot.png"
    shot.write_bytes(b"\x89PNG")

    assert attach_screenshot(shot) is True
    assert attach_screenshot(tmp_path / "missing.png") is False
    assert attach_screenshot(None) is False
    attach.file.assert_called_once()


def test_write_environment(tmp_path):
    target = write_environment(tmp_path / "allure", {"Base URL": "https://shop.test/", "Browser": "chrome"})

    assert target.name == "environment.properties"
    assert target.read_text(encoding="utf-8").splitlines() == [
        "Base_URL=https://shop.test/",
        "Browser=chrome",
    ]


def test_log_test_outcome_levels(log_records):
    log_test_outcome("tests/test_a.py::test_ok", "passed", 1.234)
    log_test_outcome("tests/test_a.py::test_bad", "failed")
    log_test_outcome("tests/test_a.py::test_skip", "skipped")

    assert log_records == [
        ("INFO", "PASSED: tests/test_a.py::test_ok (1.23s)"),
        ("ERROR", "FAILED: tests/test_a.py::test_bad"),
        ("WARNING", "SKIPPED: tests/test_a.py::test_skip"),
    ]


def test_write_spreadsheet_result_links_screenshot(make_xlsx, tmp_path):
    path = make_xlsx("results.xlsx", {"Results": [["Test"], ["test_login"]]})
    shot = tmp_path / "test_login_1.png"
    shot.write_bytes(b"\x89PNG")

    assert write_spreadsheet_result(TabularDataStore(path), "Results", "test_login", shot) is True

    reopened = TabularDataStore(path)
    assert reopened.get_cell("Results", "Screenshot", 1) == "test_login_1.png"
    cell = load_workbook(path)["Results"]["B2"]
    assert cell.hyperlink.target == shot.resolve().as_uri()
    assert cell.font.underline == "single"


def test_write_spreadsheet_result_unknown_test(make_xlsx, tmp_path):
    path = make_xlsx("results.xlsx", {"Results": [["Test"], ["test_login"]]})

    assert write_spreadsheet_result(TabularDataStore(path), "Results", "test_other", tmp_path / "x.png") is False
