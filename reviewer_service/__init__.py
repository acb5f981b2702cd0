"""Reviewer assignment service: teams, users, pull requests and reviewer selection."""

__version__ = "1.0.0"
