"""Errors raised by query operations."""

from __future__ import annotations


class KubeSearchError(Exception):
    """Base class for failures reported back to the caller."""


class ChartNotFoundError(KubeSearchError):
    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Chart with key '{key}' not found")


class NoMatchError(KubeSearchError):
    def __init__(self, query: str):
        self.query = query
        super().__init__(f"No deployments found matching '{query}'")


class DatabaseError(KubeSearchError):
    """A database file could not be opened."""
