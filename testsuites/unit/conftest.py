"""Workbook fixtures for offline unit tests."""

from pathlib import Path

import pytest
from openpyxl import Workbook


def build_xlsx(path: Path, sheets: dict) -> Path:
    """Write {sheet name: list of rows} to an .xlsx file with openpyxl."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def make_xlsx(tmp_path: Path):
    """Factory: make_xlsx("name.xlsx", {sheet: rows}) -> path under tmp_path."""
    def _make(name: str, sheets: dict) -> Path:
        return build_xlsx(tmp_path / name, sheets)
    return _make


@pytest.fixture
def users_xlsx(tmp_path: Path) -> Path:
    return build_xlsx(
        tmp_path / "users.xlsx",
        {
            "Users": [
                ["Name", "Email"],
                ["Ann", "ann@x.com"],
            ],
        },
    )


@pytest.fixture
def login_xlsx(tmp_path: Path) -> Path:
    return build_xlsx(
        tmp_path / "login.xlsx",
        {
            "LoginData": [
                ["Email", "Password", "Warning"],
                ["bad@x.com", "nope", "Warning: No match"],
                [],
                ["", "", "Warning: No match"],
            ],
            "Tests": [
                ["TestCase"],
                ["LoginTest"],
                ["Email", "Password"],
                ["a@x.com", "p1"],
                ["b@x.com", "p2"],
                [],
                ["OtherTest"],
                ["Name"],
                ["x"],
            ],
        },
    )
