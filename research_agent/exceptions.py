"""Custom exceptions for the research agent."""

from __future__ import annotations


class ResearchAgentError(Exception):
    """Base exception for research agent errors."""

    pass


class InputError(ResearchAgentError):
    """Raised when a request is missing or has invalid input."""

    pass


class FetchError(ResearchAgentError):
    """Raised when a page or search request fails."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CapabilityUnavailable(ResearchAgentError):
    """Raised when an optional capability has no credentials configured."""

    pass
