"""
================================================================================
Ninja Tools Common Utilities
================================================================================

Shared configuration management, logging setup and small helpers.

Exports:
    - get_config / set_config / reload_config / save_config
    - init_logger / get_logger
    - ConfigurationError
    - generate_email, to_int, is_ascending, take_screenshot, ensure_directory

Usage:
    from ninja_tools.common import get_config, init_logger

    init_logger()
    base_url = get_config("app.url")

================================================================================
"""

from .global_config import (
    ConfigurationError,
    get_all_config,
    get_config,
    get_logger,
    init_logger,
    reload_config,
    save_config,
    set_config,
)
from .utils import (
    ensure_directory,
    generate_email,
    is_ascending,
    sanitize_filename,
    take_screenshot,
    to_int,
)

__all__ = [
    "ConfigurationError",
    "ensure_directory",
    "generate_email",
    "get_all_config",
    "get_config",
    "get_logger",
    "init_logger",
    "is_ascending",
    "reload_config",
    "sanitize_filename",
    "save_config",
    "set_config",
    "take_screenshot",
    "to_int",
]
