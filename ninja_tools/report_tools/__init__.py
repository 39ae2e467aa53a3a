"""Allure reporting helpers."""

from .allure_utils import (
    attach_json,
    attach_screenshot,
    attach_text,
    log_test_outcome,
    write_environment,
    write_spreadsheet_result,
)

__all__ = [
    "attach_json",
    "attach_screenshot",
    "attach_text",
    "log_test_outcome",
    "write_environment",
    "write_spreadsheet_result",
]
