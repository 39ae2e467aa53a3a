"""
================================================================================
Account Success Page Object
================================================================================

Page shown after a successful login or registration
("My Account" / "Your Account Has Been Created!").

================================================================================
"""

from __future__ import annotations

from testsuites.ui_testing.framework.page_base import PageBase


class AccountSuccessPage(PageBase):
    """Landing page after login or registration."""

    URL_PATH = "index.php?route=account/success"

    SUCCESS_HEADING = "//div[@id='content']/h1"
    LOGOUT_LINK = "//aside//a[text()='Logout']"

    def get_success_message(self) -> str:
        return self.actions.get_text(self.SUCCESS_HEADING, description="Success heading")

    def is_logout_link_displayed(self) -> bool:
        return self.actions.wait_and_check_displayed(self.LOGOUT_LINK, description="Logout link")
