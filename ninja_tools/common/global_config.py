"""
================================================================================
Global Configuration for TutorialsNinja Automation
================================================================================

Centralized configuration management for the test framework and its tools,
including logging setup and configuration file loading.

Features:
    - Module-level configuration shared by every test and tool
    - YAML-based configuration loading
    - Environment variable overrides
    - Centralized Loguru logging configuration
    - Runtime updates persisted back to YAML

Author: Automation Team
License: MIT
================================================================================
"""

import copy
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml
from loguru import logger

# Global configuration storage
_config: Dict[str, Any] = {}
_config_dir: Optional[Path] = None
_logger_initialized: bool = False

DEFAULT_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


class ConfigurationError(Exception):
    """Raised when a configuration file cannot be parsed."""
    pass


def init_logger(level: str = None, format_str: str = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    This function should be called at the start of any test session or tool
    to ensure consistent logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    _ensure_config_loaded()

    log_level = str(level or get_config("logging.level", "INFO"))
    log_format = format_str or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_file = get_config("logging.file", None)
    if log_file:
        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level.upper(),
            format=log_format.replace("{level: <8}", "{level}"),  # No padding in files
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def get_logger():
    """
    Returns the configured Loguru logger instance.

    Ensures the logger is initialized before returning.
    """
    if not _logger_initialized:
        init_logger()
    return logger


def _ensure_config_loaded() -> None:
    global _config
    if not _config:
        _load_config()


def _find_config_dir() -> Optional[Path]:
    # Try multiple possible locations for flexibility
    possible_config_dirs = [
        Path(os.getenv("CONFIG_DIR", "config")),
        Path(__file__).parent.parent.parent / "config",
    ]
    for dir_path in possible_config_dirs:
        if dir_path.is_dir():
            return dir_path
    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


def _load_config() -> None:
    """
    Loads configuration from YAML files and environment variables.

    Configuration loading order:
        1. Built-in defaults
        2. Default configuration file (config/config.yaml)
        3. Environment-specific configuration (config/{ENV}.yaml)
        4. Environment variables (override YAML settings)

    Raises:
        ConfigurationError: When a YAML file is malformed
    """
    global _config, _config_dir

    config = _get_defaults()
    _config_dir = _find_config_dir()

    if not _config_dir:
        logger.warning("No configuration directory found. Using defaults.")
    else:
        default_config_path = _config_dir / "config.yaml"
        if default_config_path.exists():
            config = _deep_merge(config, _read_yaml(default_config_path))
            logger.debug(f"Loaded configuration from {default_config_path}")

        env = os.getenv("ENVIRONMENT", os.getenv("ENV", "dev"))
        env_config_path = _config_dir / f"{env}.yaml"
        if env_config_path.exists():
            config = _deep_merge(config, _read_yaml(env_config_path))
            logger.debug(f"Merged environment config: {env_config_path}")

    _config = config
    _apply_env_overrides()


def _get_defaults() -> Dict[str, Any]:
    """
    Returns default configuration values.
    """
    return {
        "app": {
            "url": "https://tutorialsninja.com/demo/",
            "login_path": "index.php?route=account/login",
            "register_path": "index.php?route=account/register",
        },
        "credentials": {
            "email": "",
            "password": "",
        },
        "browser": {
            "name": "chrome",
            "headless": True,
            "timeout_ms": 10000,
            "page_load_timeout_ms": 30000,
        },
        "data": {
            "workbook": "testdata/TutorialsNinjaTestData.xlsx",
        },
        "logging": {
            "level": "INFO",
            "format": DEFAULT_LOG_FORMAT,
        },
        "reports": {
            "allure_dir": "reports/allure-results",
            "screenshots_dir": "reports/screenshots",
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_env_value(value: str) -> Any:
    """Interpret an environment string as a YAML scalar ("false" -> False, "30" -> 30)."""
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    if isinstance(parsed, (dict, list)) or parsed is None:
        return value
    return parsed


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    Environment variable naming convention:
        - Use double underscore to separate nested keys
        - Example: BROWSER__HEADLESS=false overrides browser.headless
    """
    global _config

    for key, value in os.environ.items():
        if "__" in key and not key.startswith("_"):
            # Convert BROWSER__HEADLESS to ["browser", "headless"]
            parts = [p.lower() for p in key.split("__")]
            if all(parts):
                _set_nested(_config, parts, _parse_env_value(value))


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    """
    Sets a nested dictionary value using a list of keys.
    """
    for key in keys[:-1]:
        child = d.get(key)
        if not isinstance(child, dict):
            child = d[key] = {}
        d = child
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Args:
        key: Dot-separated key path (e.g., "logging.level", "app.url").
        default: Default value to return if key is not found.

    Returns:
        The configuration value, or the default if not found.

    Examples:
        >>> get_config("browser.name", "chrome")
        "firefox"
        >>> get_config("browser.timeout_ms", 10000)
        15000
    """
    _ensure_config_loaded()

    keys = key.split(".")
    value = _config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_config(key: str, value: Any) -> None:
    """
    Sets a configuration value at runtime.

    Args:
        key: Dot-separated key path.
        value: Value to set.
    """
    _ensure_config_loaded()

    keys = key.split(".")
    _set_nested(_config, keys, value)
    logger.debug(f"Config '{key}' set to {value!r}")


def get_all_config() -> Dict[str, Any]:
    """Returns a deep copy of the whole configuration."""
    _ensure_config_loaded()
    return copy.deepcopy(_config)


def save_config(path: Union[str, Path, None] = None) -> Path:
    """
    Writes the current configuration back to YAML.

    Args:
        path: Target file. Defaults to config.yaml in the configuration
              directory (created as ./config when none was found).

    Returns:
        The path written
    """
    _ensure_config_loaded()

    if path is None:
        path = (_config_dir or Path("config")) / "config.yaml"
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        yaml.safe_dump(_config, f, sort_keys=False, allow_unicode=True)
    logger.info(f"Configuration saved to {target}")
    return target


def reload_config() -> None:
    """
    Reloads the configuration from files.
    """
    global _config, _logger_initialized
    _config = {}
    _logger_initialized = False
    _load_config()
    init_logger()
    logger.info("Configuration reloaded.")
