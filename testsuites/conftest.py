"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers, tags tests by directory and writes the Allure
environment block.

================================================================================
"""

import platform

import pytest

from ninja_tools import __version__
from ninja_tools.common import get_config
from ninja_tools.report_tools import write_environment


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser tests (run with RUN_UI_TESTS=1)"
    )
    config.addinivalue_line(
        "markers", "unit: Offline unit tests"
    )
    config.addinivalue_line(
        "markers",
        "data(sheet, columns): Parametrize from a sheet of the test data workbook",
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the 'ui' or 'unit' marker based on the test directory.
    """
    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        elif "unit" in path:
            item.add_marker(pytest.mark.unit)


def pytest_sessionstart(session):
    """Write Allure environment.properties when an Allure results dir is set."""
    results_dir = session.config.getoption("allure_report_dir", None)
    if not results_dir:
        return
    write_environment(
        results_dir,
        {
            "Framework Version": __version__,
            "Application URL": get_config("app.url"),
            "Browser": get_config("browser.name"),
            "Headless": get_config("browser.headless"),
            "OS": platform.platform(),
            "Python Version": platform.python_version(),
        },
    )


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "TutorialsNinja UI Automation Framework",
        "=" * 60,
        "",
    ]
