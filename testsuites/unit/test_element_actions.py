from unittest.mock import MagicMock

import pytest

from testsuites.ui_testing.framework.element_actions import (
    ElementActionError,
    ElementActions,
    RetryConfig,
)


@pytest.fixture
def locator():
    return MagicMock()


@pytest.fixture
def actions(locator):
    page = MagicMock()
    page.locator.return_value = locator
    return ElementActions(page, default_timeout=5000, retry_config=RetryConfig(max_attempts=2, delay_seconds=0))


def test_click_waits_then_clicks(actions, locator):
    actions.click("#login", description="Login button")

    actions.page.locator.assert_called_with("#login")
    locator.wait_for.assert_called_once_with(state="visible", timeout=5000)
    locator.click.assert_called_once_with(timeout=5000)


def test_click_retries_transient_failures(actions, locator):
    locator.click.side_effect = [RuntimeError("detached"), None]

    actions.click("#login")

    assert locator.click.call_count == 2


def test_click_raises_after_last_attempt(actions, locator):
    locator.click.side_effect = RuntimeError("covered")

    with pytest.raises(ElementActionError) as exc_info:
        actions.click("#login")

    assert locator.click.call_count == 2
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_enter_text_clears_before_filling(actions, locator):
    actions.enter_text("#input-password", "secret", description="Password")

    locator.clear.assert_called_once_with(timeout=5000)
    locator.fill.assert_called_once_with("secret", timeout=5000)


def test_click_either_prefers_displayed_first(actions):
    first, second = MagicMock(), MagicMock()
    actions.page.locator.side_effect = lambda selector: {"#a": first, "#b": second}[selector]
    first.is_visible.return_value = False

    actions.click_either("#a", "#b")

    first.click.assert_not_called()
    second.click.assert_called_once_with(timeout=5000)


def test_select_by_index(actions, locator):
    actions.select_by_index("#country", 2)

    locator.select_option.assert_called_once_with(index=2, timeout=5000)


def test_get_text_of_hidden_element_is_empty(actions, locator):
    locator.is_visible.return_value = False

    assert actions.get_text("#warning") == ""
    locator.inner_text.assert_not_called()


def test_get_text_is_trimmed(actions, locator):
    locator.is_visible.return_value = True
    locator.inner_text.return_value = "  Warning: No match  \n"

    assert actions.get_text("#warning") == "Warning: No match"


def test_guarded_reads_swallow_lookup_failures(actions, locator):
    locator.is_visible.side_effect = RuntimeError("gone")
    locator.count.side_effect = RuntimeError("gone")
    locator.get_attribute.side_effect = RuntimeError("gone")
    locator.evaluate.side_effect = RuntimeError("gone")

    assert actions.is_displayed("#x") is False
    assert actions.is_selected("#x") is False
    assert actions.count("#x") == 0
    assert actions.get_attribute("#x", "placeholder") == ""
    assert actions.get_property("#x", "validationMessage") is None
    assert actions.get_css_value("#x", "color") == ""


def test_get_attribute_missing_value_is_empty(actions, locator):
    locator.get_attribute.return_value = None

    assert actions.get_attribute("#x", "placeholder") == ""


def test_wait_and_check_displayed(actions, locator):
    assert actions.wait_and_check_displayed("#x") is True

    locator.wait_for.side_effect = TimeoutError("timeout")
    assert actions.wait_and_check_displayed("#x") is False


def test_wait_for_element_raises_on_timeout(actions, locator):
    locator.wait_for.side_effect = TimeoutError("timeout")

    with pytest.raises(ElementActionError):
        actions.wait_for_element("#x", description="Heading")


def test_copy_and_paste_use_keyboard(actions, locator):
    actions.copy_text()
    actions.paste_text("#input-confirm")

    pressed = [call.args[0] for call in actions.page.keyboard.press.call_args_list]
    assert pressed == ["Control+A", "Control+C", "Control+V"]
    locator.click.assert_called_once_with()
