"""
================================================================================
Login Page Object
================================================================================

TutorialsNinja "Returning Customer" login form.

================================================================================
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

import allure
from loguru import logger

from ninja_tools.common import get_config
from testsuites.ui_testing.framework.page_base import PageBase

from .account_success_page import AccountSuccessPage


class LoginPage(PageBase):
    """Login page object."""

    URL_PATH = "index.php?route=account/login"
    PAGE_TITLE = "Account Login"

    EMAIL_INPUT = "#input-email"
    PASSWORD_INPUT = "#input-password"
    LOGIN_BUTTON = "//input[@value='Login']"

    @property
    def url(self) -> str:
        return urljoin(self.base_url, get_config("app.login_path", self.URL_PATH))

    @allure.step("Open login page")
    def open(self) -> "LoginPage":
        self.navigate()
        return self

    def enter_email(self, email: str) -> None:
        self.actions.enter_text(self.EMAIL_INPUT, email, description="Email address")

    def enter_password(self, password: str) -> None:
        self.actions.enter_text(self.PASSWORD_INPUT, password, description="Password")

    def click_login(self) -> AccountSuccessPage:
        self.actions.click(self.LOGIN_BUTTON, description="Login button")
        return AccountSuccessPage(self.page, self.base_url, self.actions)

    @allure.step("Login (email={email})")
    def login(self, email: Optional[str] = None, password: Optional[str] = None) -> AccountSuccessPage:
        """
        Fill the form and submit it.

        Args:
            email: Defaults to credentials.email from config
            password: Defaults to credentials.password from config

        Returns:
            The page shown after a successful login
        """
        email = get_config("credentials.email", "") if email is None else email
        password = get_config("credentials.password", "") if password is None else password

        logger.info(f"Logging in as {email}")
        self.enter_email(email)
        self.enter_password(password)
        return self.click_login()

    @allure.step("Submit login expecting failure")
    def submit_expecting_failure(self, email: str, password: str) -> "LoginPage":
        self.enter_email(email)
        self.enter_password(password)
        self.actions.click(self.LOGIN_BUTTON, description="Login button")
        return self

    def get_error_message(self) -> str:
        """Text of the page-level warning shown after a rejected login."""
        self.actions.wait_and_check_displayed(self.PAGE_LEVEL_WARNING, description="Login warning")
        return self.get_page_level_warning()
