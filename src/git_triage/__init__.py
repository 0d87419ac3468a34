"""git-triage: interactive staging of working tree changes."""

__version__ = "0.1.0"
