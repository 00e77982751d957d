"""Async HTTP client for Open Library search."""
import httpx
from typing import List, Optional, Dict, Any
import logging

from bookfinder.client import SEARCH_PATH, build_search_params, extract_docs
from bookfinder.config import Config
from bookfinder.errors import NetworkError, ParseError

logger = logging.getLogger(__name__)


class AsyncOpenLibraryClient:
    """Async client for title searches."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            base_url: API host
            timeout: Request timeout, None to wait indefinitely
            limit: Maximum matches per search
            transport: Optional custom transport
        """
        self.base_url = (base_url or Config.OPENLIBRARY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.DEFAULT_TIMEOUT
        self.limit = limit or Config.SEARCH_LIMIT

        # Create async HTTP client
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
            transport=transport
        )

    async def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Search for books asynchronously.

        Args:
            query: Non-empty, trimmed search text

        Returns:
            Raw search documents

        Raises:
            NetworkError: transport failure or non-200 status
            ParseError: body is not a usable JSON object
        """
        params = build_search_params(query, self.limit)

        try:
            logger.info(f"Async request: title={query!r}")
            response = await self.client.get(SEARCH_PATH, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Async request failed for {query!r}: {e}")
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

        return extract_docs(payload)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
