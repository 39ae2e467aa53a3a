from unittest.mock import MagicMock, call

import pytest

from testsuites.ui_testing.pages import AccountSuccessPage, LoginPage, RegisterPage

BASE_URL = "https://shop.example.com/demo"


@pytest.fixture
def actions():
    return MagicMock()


@pytest.fixture
def page():
    return MagicMock()


def test_urls_are_joined_to_base_url(page, actions):
    login = LoginPage(page, BASE_URL, actions)

    assert login.base_url == "https://shop.example.com/demo/"
    assert login.url == "https://shop.example.com/demo/index.php?route=account/login"
    assert RegisterPage(page, BASE_URL, actions).url.endswith("route=account/register")


def test_navigate_opens_page_url(page, actions):
    LoginPage(page, BASE_URL, actions).open()

    page.goto.assert_called_once_with(
        "https://shop.example.com/demo/index.php?route=account/login",
        wait_until="domcontentloaded",
    )


def test_login_fills_form_and_returns_account_page(page, actions):
    account = LoginPage(page, BASE_URL, actions).login("user@example.com", "secret")

    assert isinstance(account, AccountSuccessPage)
    assert account.actions is actions
    actions.enter_text.assert_has_calls([
        call("#input-email", "user@example.com", description="Email address"),
        call("#input-password", "secret", description="Password"),
    ])
    actions.click.assert_called_once_with("//input[@value='Login']", description="Login button")


def test_error_message_reads_page_level_warning(page, actions):
    actions.get_text.return_value = "Warning: No match for E-Mail Address and/or Password."
    login = LoginPage(page, BASE_URL, actions)

    assert login.submit_expecting_failure("bad@x.com", "nope") is login
    assert login.get_error_message().startswith("Warning: No match")
    actions.wait_and_check_displayed.assert_called_once_with(
        LoginPage.PAGE_LEVEL_WARNING, description="Login warning"
    )


def test_register_field_selectors():
    assert RegisterPage.field("firstname") == "#input-firstname"
    assert RegisterPage.field_label("confirm") == "label[for='input-confirm']"
    assert RegisterPage.field_warning("email") == "//input[@id='input-email']/following-sibling::div"
    with pytest.raises(KeyError):
        RegisterPage.field("nickname")


def test_register_account_fills_every_mandatory_field(page, actions):
    account = RegisterPage(page, BASE_URL, actions).register_account(
        "Ann", "Lee", "ann@example.com", "1234567890", "secret", newsletter=True
    )

    assert isinstance(account, AccountSuccessPage)
    filled = [c.args[:2] for c in actions.enter_text.call_args_list]
    assert filled == [
        ("#input-firstname", "Ann"),
        ("#input-lastname", "Lee"),
        ("#input-email", "ann@example.com"),
        ("#input-telephone", "1234567890"),
        ("#input-password", "secret"),
        ("#input-confirm", "secret"),
    ]
    clicked = [c.args[0] for c in actions.click.call_args_list]
    assert clicked == [
        RegisterPage.NEWSLETTER_YES,
        RegisterPage.PRIVACY_POLICY,
        RegisterPage.CONTINUE_BUTTON,
    ]


def test_go_to_login_page(page, actions):
    assert isinstance(RegisterPage(page, BASE_URL, actions).go_to_login_page(), LoginPage)
    actions.click.assert_called_once_with("text=login page", description="Login page link")


def test_email_validation_message_defaults_to_empty(page, actions):
    actions.get_property.return_value = None

    assert RegisterPage(page, BASE_URL, actions).get_email_validation_message() == ""


def test_account_page_checks_logout_link(page, actions):
    actions.wait_and_check_displayed.return_value = True

    assert AccountSuccessPage(page, BASE_URL, actions).is_logout_link_displayed() is True
