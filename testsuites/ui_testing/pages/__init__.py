"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for TutorialsNinja pages.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .account_success_page import AccountSuccessPage
from .login_page import LoginPage
from .register_page import RegisterPage

__all__ = [
    "AccountSuccessPage",
    "LoginPage",
    "RegisterPage",
]
