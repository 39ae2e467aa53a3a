"""
Test suites package.

Kept importable so page objects and the UI framework can be imported as
`testsuites.ui_testing...` from tests, IDEs and CI jobs:

  - ui_testing/framework  browser lifecycle, element actions, page base
  - ui_testing/pages      TutorialsNinja page objects
  - ui_testing/tests      browser tests (RUN_UI_TESTS=1)
  - unit                  offline tests for ninja_tools and the framework
"""
