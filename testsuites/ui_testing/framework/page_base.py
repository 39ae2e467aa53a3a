"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and URL handling
    - Elements shared by every TutorialsNinja page (heading, breadcrumbs,
      page-level alerts)
    - Page title and current URL
    - Element actions through ElementActions

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

import allure
from loguru import logger
from playwright.sync_api import Page

from ninja_tools.common import get_config

from .element_actions import ElementActions


class PageBase:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(PageBase):
            URL_PATH = "index.php?route=account/login"

            def enter_email(self, email: str) -> None:
                self.actions.enter_text(self.EMAIL_INPUT, email, description="Email")
    """

    # Override in subclasses
    URL_PATH: str = ""
    PAGE_TITLE: str = ""

    # Elements common to many pages
    PAGE_HEADING = "//div[@id='content']/h1"
    HOME_BREADCRUMB = "//i[@class='fa fa-home']"
    ACCOUNT_BREADCRUMB = "//ul[@class='breadcrumb']//a[text()='Account']"
    PAGE_LEVEL_WARNING = "//div[@class='alert alert-danger alert-dismissible']"
    PAGE_LEVEL_SUCCESS = "//div[@class='alert alert-success alert-dismissible']"

    def __init__(
        self,
        page: Page,
        base_url: Optional[str] = None,
        actions: Optional[ElementActions] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Application base URL (app.url from config when not given)
            actions: Shared ElementActions, created for `page` when not given
        """
        self.page = page
        base_url = base_url or get_config("app.url", "https://tutorialsninja.com/demo/")
        # Trailing slash so urljoin keeps the last path segment
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.actions = actions or ElementActions(page)

    @property
    def url(self) -> str:
        """Full URL of this page."""
        return urljoin(self.base_url, self.URL_PATH)

    def navigate(self, wait_for: str = "domcontentloaded") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        with allure.step(f"Navigate to {self.url}"):
            self.page.goto(self.url, wait_until=wait_for)
            logger.info(f"Navigated to: {self.url}")

    # ============================================================================
    # Common elements
    # ============================================================================

    def get_page_heading(self) -> str:
        return self.actions.get_text(self.PAGE_HEADING, description="Page heading")

    @allure.step("Click Home breadcrumb")
    def click_home_breadcrumb(self) -> None:
        self.actions.click(self.HOME_BREADCRUMB, description="Home breadcrumb")

    @allure.step("Click Account breadcrumb")
    def click_account_breadcrumb(self) -> None:
        self.actions.click(self.ACCOUNT_BREADCRUMB, description="Account breadcrumb")

    def get_page_level_warning(self) -> str:
        return self.actions.get_text(self.PAGE_LEVEL_WARNING, description="Page level warning")

    def is_page_level_warning_displayed(self) -> bool:
        return self.actions.is_displayed(self.PAGE_LEVEL_WARNING, description="Page level warning")

    def get_page_level_success(self) -> str:
        return self.actions.get_text(self.PAGE_LEVEL_SUCCESS, description="Page level success message")

    def is_page_level_success_displayed(self) -> bool:
        return self.actions.is_displayed(self.PAGE_LEVEL_SUCCESS, description="Page level success message")

    # ============================================================================
    # Page info
    # ============================================================================

    def get_title(self) -> str:
        title = self.page.title()
        logger.debug(f"Page title: {title}")
        return title

    def get_current_url(self) -> str:
        return self.page.url


__all__ = ["PageBase"]
