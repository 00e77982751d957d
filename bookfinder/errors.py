"""Errors raised while fetching search results."""
from typing import Optional


class FetchError(Exception):
    """Base class for anything that prevents a search from returning results."""

    retryable = False


class NetworkError(FetchError):
    """Transport failure or non-success HTTP status."""

    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(FetchError):
    """Response body was not a JSON object."""


class EmptyQuery(FetchError):
    """Blank query rejected before any request was made."""
