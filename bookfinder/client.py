"""HTTP client for the Open Library search API."""
import requests
from typing import Optional, Dict, Any, List
import logging

from bookfinder.config import Config
from bookfinder.errors import NetworkError, ParseError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search.json"


def build_search_params(query: str, limit: int) -> Dict[str, Any]:
    """Query parameters for a title search."""
    return {"title": query, "limit": limit}


def extract_docs(payload: Any) -> List[Dict[str, Any]]:
    """
    Pull the ``docs`` array out of a decoded search response.

    Args:
        payload: Decoded JSON body

    Returns:
        The docs exactly as delivered (empty if the key is missing)

    Raises:
        ParseError: body is not an object or ``docs`` is not an array
    """
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
    docs = payload.get("docs")
    if docs is None:
        return []
    if not isinstance(docs, list):
        raise ParseError(f"Expected 'docs' to be a list, got {type(docs).__name__}")
    return docs


class OpenLibraryClient:
    """Client for Open Library title search. One request per search, no retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Open Library client.

        Args:
            base_url: API host (defaults to the configured one)
            timeout: Request timeout in seconds, None to wait indefinitely
            limit: Maximum number of matches requested per search
            session: Optional pre-built session
        """
        self.base_url = (base_url or Config.OPENLIBRARY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.DEFAULT_TIMEOUT
        self.limit = limit or Config.SEARCH_LIMIT

        # Create session for connection pooling
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Search for books by title or topic.

        Args:
            query: Non-empty, trimmed search text

        Returns:
            Raw search documents

        Raises:
            NetworkError: transport failure or non-200 status
            ParseError: body is not a usable JSON object
        """
        url = f"{self.base_url}{SEARCH_PATH}"
        params = build_search_params(query, self.limit)

        try:
            logger.info(f"Request: {url} title={query!r}")
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for {query!r}: {e}")
            raise NetworkError(f"Request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for query: {query!r}")
            raise NetworkError(
                f"Open Library returned status {response.status_code}",
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Malformed response body for {query!r}: {e}")
            raise ParseError(f"Malformed response body: {e}") from e

        docs = extract_docs(payload)
        logger.info(f"Success: {len(docs)} docs for {query!r}")
        return docs

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
