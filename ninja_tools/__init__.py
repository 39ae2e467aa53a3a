"""
================================================================================
Ninja Tools
================================================================================

Shared tooling for the TutorialsNinja UI automation suite.

Modules:
    - common: configuration, logging and small helpers
    - data_tools: spreadsheet-backed test data store
    - report_tools: Allure reporting helpers

================================================================================
"""

__version__ = "1.0.0"

__all__ = ["common", "data_tools", "report_tools"]
