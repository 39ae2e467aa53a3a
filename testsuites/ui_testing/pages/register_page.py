"""
================================================================================
Register Page Object
================================================================================

TutorialsNinja "Register Account" form.

Form fields are addressed by a short name shared by the input, its label
and its inline warning:

    firstname, lastname, email, telephone, password, confirm

================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import urljoin

import allure
from loguru import logger

from ninja_tools.common import get_config
from testsuites.ui_testing.framework.page_base import PageBase

from .account_success_page import AccountSuccessPage
from .login_page import LoginPage


FIELD_IDS: Dict[str, str] = {
    "firstname": "input-firstname",
    "lastname": "input-lastname",
    "email": "input-email",
    "telephone": "input-telephone",
    "password": "input-password",
    "confirm": "input-confirm",
}


class RegisterPage(PageBase):
    """Registration page object."""

    URL_PATH = "index.php?route=account/register"
    PAGE_TITLE = "Register Account"

    PRIVACY_POLICY = "input[name='agree']"
    PRIVACY_POLICY_LABEL = "div[class='pull-right']"
    NEWSLETTER_YES = "//input[@name='newsletter'][@value='1']"
    NEWSLETTER_NO = "//input[@name='newsletter'][@value='0']"
    CONTINUE_BUTTON = "//input[@value='Continue']"
    REGISTER_BREADCRUMB = "//ul[@class='breadcrumb']//a[text()='Register']"
    LOGIN_PAGE_LINK = "text=login page"

    @property
    def url(self) -> str:
        return urljoin(self.base_url, get_config("app.register_path", self.URL_PATH))

    @staticmethod
    def field(name: str) -> str:
        """
        Selector of a form input by short name.

        Raises:
            KeyError: For an unknown field name
        """
        return f"#{FIELD_IDS[name]}"

    @staticmethod
    def field_label(name: str) -> str:
        return f"label[for='{FIELD_IDS[name]}']"

    @staticmethod
    def field_warning(name: str) -> str:
        return f"//input[@id='{FIELD_IDS[name]}']/following-sibling::div"

    @allure.step("Open register page")
    def open(self) -> "RegisterPage":
        self.navigate()
        return self

    # ============================================================================
    # Actions
    # ============================================================================

    def enter_field(self, name: str, text: str) -> None:
        self.actions.enter_text(self.field(name), text, description=f"{name} field")

    def clear_field(self, name: str) -> None:
        self.actions.clear_text(self.field(name), description=f"{name} field")

    def select_privacy_policy(self) -> None:
        self.actions.click(self.PRIVACY_POLICY, description="Privacy policy checkbox")

    def select_newsletter(self, subscribe: bool = True) -> None:
        selector = self.NEWSLETTER_YES if subscribe else self.NEWSLETTER_NO
        self.actions.click(selector, description=f"Newsletter {'Yes' if subscribe else 'No'}")

    def click_continue(self) -> AccountSuccessPage:
        self.actions.click(self.CONTINUE_BUTTON, description="Continue button")
        return AccountSuccessPage(self.page, self.base_url, self.actions)

    def go_to_login_page(self) -> LoginPage:
        """Follow the "login page" link at the top of the form."""
        self.actions.click(self.LOGIN_PAGE_LINK, description="Login page link")
        return LoginPage(self.page, self.base_url, self.actions)

    def click_register_breadcrumb(self) -> "RegisterPage":
        self.actions.click(self.REGISTER_BREADCRUMB, description="Register breadcrumb")
        return RegisterPage(self.page, self.base_url, self.actions)

    @allure.step("Register account ({email})")
    def register_account(
        self,
        first_name: str,
        last_name: str,
        email: str,
        telephone: str,
        password: str,
        newsletter: Optional[bool] = None,
    ) -> AccountSuccessPage:
        """
        Fill every mandatory field, accept the privacy policy and submit.

        Args:
            newsletter: True/False selects the matching option, None leaves
                        the default

        Returns:
            The page shown after the account was created
        """
        logger.info(f"Registering account: {first_name} {last_name} <{email}>")
        self.enter_field("firstname", first_name)
        self.enter_field("lastname", last_name)
        self.enter_field("email", email)
        self.enter_field("telephone", telephone)
        self.enter_field("password", password)
        self.enter_field("confirm", password)
        if newsletter is not None:
            self.select_newsletter(newsletter)
        self.select_privacy_policy()
        return self.click_continue()

    # ============================================================================
    # Reads
    # ============================================================================

    def get_field_warning(self, name: str) -> str:
        return self.actions.get_text(self.field_warning(name), description=f"{name} warning")

    def is_field_warning_displayed(self, name: str) -> bool:
        return self.actions.is_displayed(self.field_warning(name), description=f"{name} warning")

    def get_field_label(self, name: str) -> str:
        return self.actions.get_text(self.field_label(name), description=f"{name} label")

    def get_placeholder(self, name: str) -> str:
        return self.actions.get_attribute(self.field(name), "placeholder", description=f"{name} field")

    def get_field_attribute(self, name: str, attribute: str) -> str:
        return self.actions.get_attribute(self.field(name), attribute, description=f"{name} field")

    def get_field_css_value(self, name: str, css_property: str) -> str:
        return self.actions.get_css_value(self.field(name), css_property, description=f"{name} field")

    def get_continue_button_css_value(self, css_property: str) -> str:
        return self.actions.get_css_value(self.CONTINUE_BUTTON, css_property, description="Continue button")

    def get_label_css_value(self, name: str, css_property: str) -> str:
        """Computed CSS of a field label."""
        return self.actions.get_css_value(self.field_label(name), css_property, description=f"{name} label")

    def get_email_validation_message(self) -> str:
        """Browser-native validation message of the email input."""
        return self.actions.get_property(self.field("email"), "validationMessage", description="email field") or ""

    def is_privacy_policy_selected(self) -> bool:
        return self.actions.is_selected(self.PRIVACY_POLICY, description="Privacy policy checkbox")

    def is_register_page(self) -> bool:
        """Whether the Register breadcrumb is displayed."""
        return self.actions.is_displayed(self.REGISTER_BREADCRUMB, description="Register breadcrumb")
