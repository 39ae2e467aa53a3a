"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for enriching Allure reports from UI tests: attachments, the
environment block shown on the report overview, outcome logging and
linking failure screenshots back into the test data workbook.

Features:
- Custom attachment helpers
- Environment properties
- Test outcome logging
- Spreadsheet result links

================================================================================
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import allure
from loguru import logger

from ninja_tools.data_tools import TabularDataStore


SCREENSHOT_COLUMN = "Screenshot"


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_screenshot(path: Union[str, Path, None], name: str = "Screenshot") -> bool:
    """
    Attach a PNG file to Allure report.

    Returns:
        True when the file existed and was attached
    """
    if not path or not Path(path).is_file():
        logger.warning(f"Screenshot not found, nothing attached: {path}")
        return False
    allure.attach.file(
        str(path),
        name=name,
        attachment_type=allure.attachment_type.PNG
    )
    return True


# ================================================================================
# Report Metadata
# ================================================================================

def write_environment(results_dir: Union[str, Path], info: Dict[str, Any]) -> Path:
    """
    Write the Allure `environment.properties` file.

    Args:
        results_dir: Allure results directory
        info: Key/value pairs shown in the report's Environment widget

    Returns:
        Path of the written file
    """
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    target = results_dir / "environment.properties"

    lines = []
    for key, value in info.items():
        # Properties keys cannot contain separators
        safe_key = str(key).replace(" ", "_").replace("=", "_").replace(":", "_")
        lines.append(f"{safe_key}={value}")
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")

    logger.debug(f"Allure environment written to {target}")
    return target


def log_test_outcome(nodeid: str, outcome: str, duration: Optional[float] = None) -> None:
    """
    Log a test result line the same way for every test.

    Args:
        nodeid: pytest node id
        outcome: "passed", "failed", "skipped" or "started"
        duration: Call duration in seconds
    """
    suffix = f" ({duration:.2f}s)" if duration is not None else ""
    outcome = outcome.lower()
    if outcome == "failed":
        logger.error(f"FAILED: {nodeid}{suffix}")
    elif outcome == "skipped":
        logger.warning(f"SKIPPED: {nodeid}{suffix}")
    elif outcome == "started":
        logger.info(f"STARTED: {nodeid}")
    else:
        logger.info(f"{outcome.upper()}: {nodeid}{suffix}")


# ================================================================================
# Spreadsheet Results
# ================================================================================

def write_spreadsheet_result(
    store: TabularDataStore,
    sheet: str,
    test_name: str,
    screenshot: Union[str, Path],
    column: str = SCREENSHOT_COLUMN,
) -> bool:
    """
    Link a failure screenshot into the row of the data sheet whose first
    column equals `test_name`.

    Returns:
        True when the link was written
    """
    url = Path(screenshot).resolve().as_uri()
    written = store.add_hyperlink(sheet, column, test_name, url, Path(screenshot).name)
    if written:
        logger.info(f"Linked screenshot for '{test_name}' in sheet '{sheet}'")
    return written


__all__ = [
    "SCREENSHOT_COLUMN",
    "attach_json",
    "attach_screenshot",
    "attach_text",
    "log_test_outcome",
    "write_environment",
    "write_spreadsheet_result",
]
