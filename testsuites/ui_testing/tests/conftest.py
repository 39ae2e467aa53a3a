"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser management and page objects, spreadsheet-driven
parametrization and failure reporting for TutorialsNinja UI tests.

Key Features:
- Browser and page lifecycle management
- Page Object fixtures
- `@pytest.mark.data(...)` parametrization from the test data workbook
- Screenshot capture on failure, linked into Allure and the workbook
- Opt-in execution: browser tests run only with RUN_UI_TESTS=1

================================================================================
"""

import os
from pathlib import Path
from typing import Generator

import pytest
from loguru import logger
from playwright.sync_api import Page, BrowserContext

from ninja_tools.common import get_config, take_screenshot
from ninja_tools.data_tools import TabularDataStore, parametrize_from_sheet
from ninja_tools.report_tools import (
    attach_screenshot,
    log_test_outcome,
    write_spreadsheet_result,
)
from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.pages import AccountSuccessPage, LoginPage, RegisterPage


UI_TESTS_DIR = Path(__file__).parent
RESULTS_SHEET = "Results"

# Rows written when the configured workbook does not exist yet
DEFAULT_LOGIN_DATA = [
    ("Email", "Password", "Warning"),
    ("invalid_user@example.com", "wrong_password", "Warning: No match for E-Mail Address and/or Password."),
    ("", "", "Warning: No match for E-Mail Address and/or Password."),
]


def ui_tests_enabled() -> bool:
    return os.getenv("RUN_UI_TESTS", "0").strip().lower() in ("1", "true", "yes")


def data_workbook_path() -> Path:
    return Path(get_config("data.workbook", "testdata/TutorialsNinjaTestData.xlsx"))


def seed_default_workbook(path: Path) -> None:
    """Create the test data workbook with default login data when missing."""
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    store = TabularDataStore(path, create_if_missing=True)
    header, *rows = DEFAULT_LOGIN_DATA
    with store.batch():
        store.add_sheet("LoginData")
        for column in header:
            store.add_column("LoginData", column)
        for row_number, row in enumerate(rows, start=1):
            for column, value in zip(header, row):
                store.set_cell("LoginData", column, row_number, value)
        store.add_sheet(RESULTS_SHEET)
        store.add_column(RESULTS_SHEET, "Test")
        store.add_column(RESULTS_SHEET, "Screenshot")
    logger.info(f"Seeded default test data workbook: {path}")


# ================================================================================
# Collection
# ================================================================================

def pytest_collection_modifyitems(config, items):
    """Skip browser tests unless RUN_UI_TESTS=1."""
    if ui_tests_enabled():
        return
    skip_ui = pytest.mark.skip(reason="Browser tests disabled. Set RUN_UI_TESTS=1 to run them.")
    for item in items:
        if UI_TESTS_DIR in Path(str(item.fspath)).parents:
            item.add_marker(skip_ui)


def pytest_generate_tests(metafunc):
    """
    Parametrize tests marked with `@pytest.mark.data(sheet, columns=[...])`
    from the configured test data workbook.

    Column names become argument names in lower case.
    """
    marker = metafunc.definition.get_closest_marker("data")
    if marker is None or not marker.args:
        return

    sheet = marker.args[0]
    columns = marker.kwargs.get("columns")
    argnames = [column.lower() for column in columns]

    cases = []
    if ui_tests_enabled():
        path = data_workbook_path()
        seed_default_workbook(path)
        cases = parametrize_from_sheet(path, sheet, columns)
    metafunc.parametrize(argnames, cases)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager() -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser for all tests in the session.
    """
    manager = BrowserManager()
    manager.start()
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def context(browser_manager: BrowserManager) -> Generator[BrowserContext, None, None]:
    """Function-scoped browser context fixture for test isolation."""
    context = browser_manager.new_context()
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Generator[Page, None, None]:
    """Function-scoped page fixture."""
    page = context.new_page()
    yield page
    page.close()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page) -> LoginPage:
    """LoginPage, already opened."""
    return LoginPage(page).open()


@pytest.fixture
def register_page(page: Page) -> RegisterPage:
    """RegisterPage, already opened."""
    return RegisterPage(page).open()


@pytest.fixture
def account_page(login_page: LoginPage) -> AccountSuccessPage:
    """Account page after logging in with the configured credentials."""
    return login_page.login()


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

def pytest_runtest_logstart(nodeid, location):
    log_test_outcome(nodeid, "started")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Log every test outcome; on failure capture a screenshot, attach it to
    the Allure report and link it into the workbook's Results sheet.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" or (report.when == "setup" and report.outcome != "passed"):
        log_test_outcome(item.nodeid, report.outcome, report.duration)

    if report.when != "call" or not report.failed:
        return

    page = getattr(item, "funcargs", {}).get("page")
    if page is None:
        return

    screenshot = take_screenshot(page, item.name)
    if screenshot is None:
        return
    attach_screenshot(screenshot, name="failure_screenshot")

    path = data_workbook_path()
    if path.exists():
        store = TabularDataStore(path)
        if store.sheet_exists(RESULTS_SHEET):
            if store.find_row(RESULTS_SHEET, "Test", item.name) == -1:
                store.set_cell(RESULTS_SHEET, "Test", store.row_count(RESULTS_SHEET) + 1, item.name)
            write_spreadsheet_result(store, RESULTS_SHEET, item.name, screenshot)
