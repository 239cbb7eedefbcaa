"""Exceptions raised by the case network engine.

Graph operations themselves are tolerant of bad records; these are reserved
for caller-facing limits and unusable input documents.
"""


class CaseNetworkError(Exception):
    """Base class for case network errors."""


class GraphTooLargeError(CaseNetworkError, ValueError):
    """Graph exceeds the configured node or link ceiling."""

    def __init__(self, kind: str, count: int, limit: int):
        self.kind = kind
        self.count = count
        self.limit = limit
        super().__init__(f"Graph has {count} {kind}, limit is {limit}")


class InputFormatError(CaseNetworkError, ValueError):
    """Input document is not a usable record bundle."""
