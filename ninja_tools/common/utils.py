"""
================================================================================
Common Test Utilities
================================================================================

Small helpers shared by page objects, tests and reporting:
unique test emails, lenient number parsing, ordering checks and
browser screenshots.

================================================================================
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from loguru import logger

from .global_config import get_config


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensures a directory exists, creating it if necessary.

    Returns:
        The directory path (for chaining)
    """
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def generate_email(domain: str = "example.com") -> str:
    """
    Generate a unique email address from the current timestamp.

    Example:
        >>> generate_email()
        "20240307153012123456@example.com"
    """
    email = f"{datetime.now().strftime('%Y%m%d%H%M%S%f')}@{domain}"
    logger.info(f"Generated email: {email}")
    return email


def to_int(text: Any) -> int:
    """Parse an integer, returning 0 (and logging) when the text is not one."""
    try:
        return int(str(text).strip())
    except (TypeError, ValueError) as e:
        logger.error(f"Cannot convert {text!r} to integer: {e}")
        return 0


def is_ascending(items: Optional[Sequence[str]]) -> bool:
    """Check whether items are in natural ascending order. Empty counts as ascending."""
    if not items:
        return True
    result = list(items) == sorted(items)
    logger.debug(f"Items in ascending order: {result}")
    return result


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)


def take_screenshot(page: Any, name: str, directory: Union[str, Path, None] = None) -> Optional[str]:
    """
    Capture a full-page screenshot of a Playwright page.

    The file is named `<sanitized name>_<yyyyMMdd_HHmmss_fff>.png` and placed
    in `reports.screenshots_dir` unless `directory` is given.

    Args:
        page: Playwright Page
        name: Descriptive name, usually the test node name
        directory: Target directory override

    Returns:
        Absolute file path, or None when the screenshot could not be taken
    """
    if page is None:
        logger.error("No page available. Cannot take screenshot.")
        return None

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
    target_dir = ensure_directory(directory or get_config("reports.screenshots_dir", "reports/screenshots"))
    file_path = (target_dir / f"{sanitize_filename(name)}_{timestamp}.png").resolve()

    try:
        page.screenshot(path=str(file_path), full_page=True)
    except Exception as e:
        logger.error(f"Failed to take screenshot '{name}': {e}")
        return None

    logger.info(f"Screenshot saved: {file_path}")
    return str(file_path)


__all__ = [
    "ensure_directory",
    "generate_email",
    "is_ascending",
    "sanitize_filename",
    "take_screenshot",
    "to_int",
]
