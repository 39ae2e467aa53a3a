"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework (sync API).

Components:
    - browser_manager: Browser lifecycle management
    - element_actions: Element interactions with retries and guarded reads
    - page_base: Base page object for common operations

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .element_actions import ElementActionError, ElementActions, RetryConfig
from .page_base import PageBase

__all__ = [
    "BrowserManager",
    "ElementActionError",
    "ElementActions",
    "PageBase",
    "RetryConfig",
]
