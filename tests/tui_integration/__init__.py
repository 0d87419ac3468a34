"""TUI integration tests for the git-triage status picker.

These drive the Textual app through its pilot:

    pytest tests/tui_integration/
"""
