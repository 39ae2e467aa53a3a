"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser instance per manager
    - Context isolation per test
    - Browser name aliases (chrome -> chromium)
    - Default timeouts from configuration

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    sync_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from ninja_tools.common import get_config


# Element wait (ms) and navigation timeout (ms)
IMPLICIT_WAIT_MS = 10_000
PAGE_LOAD_TIMEOUT_MS = 30_000

BROWSER_ALIASES: Dict[str, str] = {
    "chrome": "chromium",
    "chromium": "chromium",
    "edge": "chromium",
    "firefox": "firefox",
    "webkit": "webkit",
    "safari": "webkit",
}


def resolve_browser_type(name: Optional[str]) -> str:
    """Map a configured browser name to a Playwright browser type."""
    key = (name or "chrome").strip().lower()
    if key not in BROWSER_ALIASES:
        logger.warning(f"Browser '{name}' not recognized, defaulting to chromium.")
        return "chromium"
    return BROWSER_ALIASES[key]


class BrowserManager:
    """
    Manages the browser instance and contexts for UI testing.

    Usage:
        with BrowserManager() as manager:
            page = manager.new_page()
            page.goto("https://tutorialsninja.com/demo/")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": ["--ignore-certificate-errors"],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        browser_name: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout_ms: Optional[int] = None,
        page_load_timeout_ms: Optional[int] = None,
    ):
        """
        Initialize browser manager. Unset arguments come from configuration.

        Args:
            browser_name: 'chrome', 'chromium', 'firefox' or 'webkit'
            headless: Run browser in headless mode
            timeout_ms: Default wait for element operations
            page_load_timeout_ms: Default navigation timeout
        """
        self.browser_name = browser_name or get_config("browser.name", "chrome")
        self.browser_type = resolve_browser_type(self.browser_name)
        self.headless = get_config("browser.headless", True) if headless is None else headless
        self.timeout_ms = int(timeout_ms or get_config("browser.timeout_ms", IMPLICIT_WAIT_MS))
        self.page_load_timeout_ms = int(
            page_load_timeout_ms or get_config("browser.page_load_timeout_ms", PAGE_LOAD_TIMEOUT_MS)
        )

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = sync_playwright().start()
        browser_launcher = getattr(self._playwright, self.browser_type)

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }
        if self.browser_type != "chromium":
            launch_options.pop("args")

        self._browser = browser_launcher.launch(**launch_options)
        logger.info(
            f"Browser started: {self.browser_name} -> {self.browser_type} "
            f"(headless={self.headless}, timeout={self.timeout_ms}ms, "
            f"page load={self.page_load_timeout_ms}ms)"
        )

    def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.info("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context with default timeouts applied.

        Each context is isolated - separate cookies, localStorage, etc.

        Raises:
            RuntimeError: When the browser was not started
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        context = self._browser.new_context(**context_options)
        context.set_default_timeout(self.timeout_ms)
        context.set_default_navigation_timeout(self.page_load_timeout_ms)
        self._contexts.append(context)
        return context

    def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """Create new page in a new or existing context."""
        if context is None:
            context = self.new_context(**context_options)
        return context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BROWSER_ALIASES",
    "BrowserManager",
    "resolve_browser_type",
]
