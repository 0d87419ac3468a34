"""Textual front-end for git-triage."""
