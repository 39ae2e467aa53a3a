# ================================================================================
# Element Actions Module
# ================================================================================
#
# UI element interaction utilities with built-in retry logic, wait
# mechanisms, and Allure integration.
#
# Key Features:
#   - Retry with exponential backoff for state-changing actions
#   - Guarded reads that return empty results instead of failing
#   - Allure step integration
#   - Keyboard copy/paste actions
#   - Dropdown selection by index or label
#
# ================================================================================

import time
from typing import Any, Callable, List, Optional, Union
from functools import wraps

import allure
from loguru import logger
from playwright.sync_api import Page, Locator

from ninja_tools.common import get_config


class ElementActionError(Exception):
    """Raised when an element action still fails after all retries."""
    pass


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        delay_seconds: float = 1.0,
        backoff_multiplier: float = 2.0,
        max_delay_seconds: float = 10.0
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of retry attempts
            delay_seconds: Initial delay between retries
            backoff_multiplier: Multiplier for exponential backoff
            max_delay_seconds: Maximum delay between retries
        """
        self.max_attempts = max_attempts
        self.delay_seconds = delay_seconds
        self.backoff_multiplier = backoff_multiplier
        self.max_delay_seconds = max_delay_seconds


def with_retry(config: RetryConfig = None):
    """
    Decorator for adding retry logic to element actions.

    Uses `config` when given, otherwise the instance's `retry_config`.

    Raises:
        ElementActionError: When every attempt failed
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            retry = config or getattr(self, "retry_config", None) or RetryConfig()
            last_exception = None
            delay = retry.delay_seconds

            for attempt in range(retry.max_attempts):
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    last_exception = e
                    if attempt < retry.max_attempts - 1:
                        logger.warning(
                            f"Attempt {attempt + 1}/{retry.max_attempts} failed for "
                            f"{func.__name__}: {str(e)}. Retrying in {delay}s..."
                        )
                        time.sleep(delay)
                        delay = min(
                            delay * retry.backoff_multiplier,
                            retry.max_delay_seconds
                        )

            logger.error(
                f"All {retry.max_attempts} attempts failed for {func.__name__}: "
                f"{str(last_exception)}"
            )
            raise ElementActionError(
                f"{func.__name__} failed after {retry.max_attempts} attempts: {last_exception}"
            ) from last_exception

        return wrapper
    return decorator


def _mask(text: str, name: str) -> str:
    lowered = name.lower()
    if "password" in lowered or "passwd" in lowered:
        return "****"
    return text


class ElementActions:
    """
    Element interaction helpers for page objects.

    State-changing actions (click, enter text, select) retry and raise
    ElementActionError when they keep failing. Reads are guarded: a missing
    or hidden element yields "", False, 0 or [] and a log line.

    Example:
        actions = ElementActions(page)
        actions.enter_text("#input-email", "user@example.com", description="Email")
        actions.click("//input[@value='Login']", description="Login button")
    """

    def __init__(
        self,
        page: Page,
        default_timeout: int = None,
        retry_config: RetryConfig = None
    ):
        """
        Initialize ElementActions with a Playwright page.

        Args:
            page: Playwright Page object
            default_timeout: Default timeout for operations in milliseconds
                             (browser.timeout_ms from config when not given)
            retry_config: Retry behavior for state-changing actions
        """
        self.page = page
        self.default_timeout = default_timeout or int(get_config("browser.timeout_ms", 10000))
        self.retry_config = retry_config or RetryConfig()

    # ============================================================================
    # Actions
    # ============================================================================

    @with_retry()
    @allure.step("Click element: {description}")
    def click(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> None:
        """
        Click on an element once it is visible.

        Args:
            selector: CSS/XPath selector or Locator object
            description: Human-readable description for reporting
            timeout: Click timeout in milliseconds
        """
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        logger.info(f"Clicking element: {description or selector}")

        locator.wait_for(state="visible", timeout=timeout)
        locator.click(timeout=timeout)

        logger.debug(f"Successfully clicked: {description or selector}")

    @allure.step("Click either element: {description}")
    def click_either(
        self,
        first: Union[str, Locator],
        second: Union[str, Locator],
        description: str = ""
    ) -> None:
        """Click `first` when it is displayed, otherwise `second`."""
        if self.is_displayed(first):
            self.click(first, description=description)
        else:
            logger.debug(f"First element not displayed, clicking alternative: {second}")
            self.click(second, description=description)

    @with_retry()
    @allure.step("Enter text: {description}")
    def enter_text(
        self,
        selector: Union[str, Locator],
        text: str,
        description: str = "",
        timeout: int = None
    ) -> None:
        """
        Clear an input field, then fill it with text.

        Values of password fields are masked in the log.
        """
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        shown = _mask(text, f"{description} {selector}")
        logger.info(f"Entering text into {description or selector}: '{shown}'")

        locator.wait_for(state="visible", timeout=timeout)
        locator.clear(timeout=timeout)
        locator.fill(text, timeout=timeout)

    @with_retry()
    @allure.step("Clear text: {description}")
    def clear_text(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> None:
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        logger.info(f"Clearing text of: {description or selector}")

        locator.wait_for(state="visible", timeout=timeout)
        locator.clear(timeout=timeout)

    @with_retry()
    @allure.step("Select option by index {index}: {description}")
    def select_by_index(
        self,
        selector: Union[str, Locator],
        index: int,
        description: str = "",
        timeout: int = None
    ) -> None:
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        logger.info(f"Selecting option #{index} in {description or selector}")

        locator.wait_for(state="visible", timeout=timeout)
        locator.select_option(index=index, timeout=timeout)

    @with_retry()
    @allure.step("Select option '{label}': {description}")
    def select_by_label(
        self,
        selector: Union[str, Locator],
        label: str,
        description: str = "",
        timeout: int = None
    ) -> None:
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        logger.info(f"Selecting option '{label}' in {description or selector}")

        locator.wait_for(state="visible", timeout=timeout)
        locator.select_option(label=label, timeout=timeout)

    @allure.step("Wait for element: {description}")
    def wait_for_element(
        self,
        selector: Union[str, Locator],
        description: str = "",
        state: str = "visible",
        timeout: int = None
    ) -> Locator:
        """
        Wait for an element to reach a specific state.

        Args:
            selector: CSS/XPath selector or Locator object
            description: Human-readable description for reporting
            state: Expected state - "visible", "hidden", "attached", "detached"
            timeout: Wait timeout in milliseconds

        Returns:
            The Locator object

        Raises:
            ElementActionError: When the state is not reached in time
        """
        timeout = timeout or self.default_timeout
        locator = self._get_locator(selector)

        logger.info(f"Waiting for {description or selector} to be {state}")

        try:
            locator.wait_for(state=state, timeout=timeout)
        except Exception as e:
            logger.error(f"Element {description or selector} not {state} after {timeout}ms: {e}")
            raise ElementActionError(f"Element {description or selector} not {state}: {e}") from e
        return locator

    @allure.step("Wait and check displayed: {description}")
    def wait_and_check_displayed(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> bool:
        """Wait for visibility; False instead of an error on timeout."""
        timeout = timeout or self.default_timeout
        try:
            self._get_locator(selector).wait_for(state="visible", timeout=timeout)
            return True
        except Exception as e:
            logger.warning(f"Element {description or selector} not displayed within {timeout}ms: {e}")
            return False

    def wait_and_click(
        self,
        selector: Union[str, Locator],
        description: str = "",
        timeout: int = None
    ) -> None:
        self.wait_for_element(selector, description=description, timeout=timeout)
        self.click(selector, description=description, timeout=timeout)

    @allure.step("Copy text with keyboard")
    def copy_text(self) -> None:
        """Select all and copy from the focused element."""
        try:
            self.page.keyboard.press("Control+A")
            self.page.keyboard.press("Control+C")
        except Exception as e:
            logger.error(f"Failed to copy text with keyboard: {e}")

    @allure.step("Paste text into: {description}")
    def paste_text(self, selector: Union[str, Locator], description: str = "") -> None:
        try:
            self._get_locator(selector).click()
            self.page.keyboard.press("Control+V")
        except Exception as e:
            logger.error(f"Failed to paste text into {description or selector}: {e}")

    # ============================================================================
    # Reads
    # ============================================================================

    def is_displayed(self, selector: Union[str, Locator], description: str = "") -> bool:
        """Check if an element is visible right now (no waiting)."""
        try:
            return self._get_locator(selector).is_visible()
        except Exception as e:
            logger.warning(f"Could not check visibility of {description or selector}: {e}")
            return False

    @allure.step("Get text: {description}")
    def get_text(self, selector: Union[str, Locator], description: str = "") -> str:
        """
        Get the visible text of an element.

        Returns:
            Trimmed text, or "" when the element is not displayed
        """
        if not self.is_displayed(selector, description):
            logger.warning(f"Element {description or selector} is not displayed, cannot get text.")
            return ""
        try:
            text = (self._get_locator(selector).inner_text() or "").strip()
        except Exception as e:
            logger.error(f"Failed to get text from {description or selector}: {e}")
            return ""

        logger.debug(f"Got text from {description or selector}: '{text}'")
        return text

    def get_texts(self, selector: Union[str, Locator], description: str = "") -> List[str]:
        """Visible text of every element matching the selector."""
        try:
            texts = self._get_locator(selector).all_inner_texts()
        except Exception as e:
            logger.error(f"Failed to get texts from {description or selector}: {e}")
            return []
        return [text.strip() for text in texts]

    def count(self, selector: Union[str, Locator]) -> int:
        try:
            return self._get_locator(selector).count()
        except Exception as e:
            logger.warning(f"Could not count elements for {selector}: {e}")
            return 0

    def get_attribute(
        self,
        selector: Union[str, Locator],
        attribute: str,
        description: str = ""
    ) -> str:
        """
        Get an attribute value of an element.

        Returns:
            Attribute value, or "" when absent or unreadable
        """
        try:
            value = self._get_locator(selector).get_attribute(attribute)
        except Exception as e:
            logger.error(f"Failed to get attribute '{attribute}' from {description or selector}: {e}")
            return ""

        logger.debug(f"Got attribute {attribute} from {description or selector}: '{value}'")
        return value or ""

    def get_property(
        self,
        selector: Union[str, Locator],
        name: str,
        description: str = ""
    ) -> Any:
        """Read a DOM property (e.g. `validationMessage`), None on failure."""
        try:
            return self._get_locator(selector).evaluate("(el, name) => el[name]", name)
        except Exception as e:
            logger.error(f"Failed to get property '{name}' from {description or selector}: {e}")
            return None

    def get_css_value(
        self,
        selector: Union[str, Locator],
        css_property: str,
        description: str = ""
    ) -> str:
        """Computed CSS value of an element, "" on failure."""
        try:
            value = self._get_locator(selector).evaluate(
                "(el, prop) => window.getComputedStyle(el).getPropertyValue(prop)",
                css_property,
            )
        except Exception as e:
            logger.error(f"Failed to get CSS '{css_property}' from {description or selector}: {e}")
            return ""
        return value or ""

    def is_selected(self, selector: Union[str, Locator], description: str = "") -> bool:
        """Whether a displayed checkbox or radio button is checked."""
        if not self.is_displayed(selector, description):
            logger.warning(f"Element {description or selector} is not displayed. Cannot check if selected.")
            return False
        try:
            return self._get_locator(selector).is_checked()
        except Exception as e:
            logger.error(f"Failed to read selected state of {description or selector}: {e}")
            return False

    def _get_locator(self, selector: Union[str, Locator]) -> Locator:
        """Convert selector to Locator if needed."""
        if isinstance(selector, Locator):
            return selector
        return self.page.locator(selector)


__all__ = [
    "ElementActionError",
    "ElementActions",
    "RetryConfig",
    "with_retry",
]
