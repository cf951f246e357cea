"""
Errors raised when the analysis service cannot be reached or answered badly.

A malformed analysis payload is not an error: it degrades to
``FALLBACK_RESULT`` instead.
"""

from typing import Optional


class AnalysisError(Exception):
    """Base class for analysis transport and configuration failures."""


class MissingCredentialError(AnalysisError):
    """No API key is configured for the analysis service."""


class AnalysisServiceError(AnalysisError):
    """The analysis service rejected the request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(AnalysisError):
    """The analysis service answered with an empty body."""
