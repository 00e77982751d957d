"""Search pipeline: fetch, normalize, deduplicate and sort.

``search_books`` and ``search_books_async`` never raise on fetch failure:
the error is logged and an empty batch is returned. ``SearchSession`` holds
the state a front end would otherwise keep globally (current term, sort
choice, current batch) and discards results from superseded searches.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from bookfinder.errors import EmptyQuery, FetchError
from bookfinder.models import Book, SortKey, SortOrder
from bookfinder.parse import normalize, deduplicate_books
from bookfinder.sort import sort_books

logger = logging.getLogger(__name__)


def validate_query(query: Optional[str]) -> str:
    """
    Trim a query, rejecting blank input.

    Raises:
        EmptyQuery: query is None, empty or whitespace only
    """
    cleaned = (query or "").strip()
    if not cleaned:
        raise EmptyQuery("Search query is empty")
    return cleaned


def search_books(client, query: str, seed: int = 0) -> List[Book]:
    """
    Run one search and return the normalized batch.

    Args:
        client: Object with a ``search(query)`` method returning raw docs
        query: Search text
        seed: Seed for filler rating and page values

    Returns:
        Books in the order delivered, empty on any fetch failure
    """
    try:
        docs = client.search(validate_query(query))
    except FetchError as e:
        logger.error(f"Search for {query!r} failed: {e}")
        return []
    return deduplicate_books(normalize(docs, seed=seed))


async def search_books_async(client, query: str, seed: int = 0) -> List[Book]:
    """Async counterpart of ``search_books``."""
    try:
        docs = await client.search(validate_query(query))
    except FetchError as e:
        logger.error(f"Search for {query!r} failed: {e}")
        return []
    return deduplicate_books(normalize(docs, seed=seed))


@dataclass
class SearchSession:
    """Caller-owned state for one interactive search session."""
    term: str = ""
    sort_key: SortKey = SortKey.TITLE
    sort_order: SortOrder = SortOrder.ASC
    books: List[Book] = field(default_factory=list)
    loading: bool = False
    generation: int = 0
    seed: int = 0

    def begin_search(self, term: str) -> int:
        """Record a new search and return its generation token."""
        self.term = validate_query(term)
        self.generation += 1
        self.loading = True
        return self.generation

    def apply_results(self, generation: int, books: List[Book]) -> bool:
        """
        Replace the batch with results of search ``generation``.

        Returns:
            False if a newer search was started meanwhile (results dropped)
        """
        if generation != self.generation:
            logger.debug(f"Dropping stale results (generation {generation}, current {self.generation})")
            return False
        self.books = list(books)
        self.loading = False
        return True

    def set_sort(
        self,
        key: Union[SortKey, str],
        order: Optional[Union[SortOrder, str]] = None
    ):
        self.sort_key = SortKey(key)
        if order is not None:
            self.sort_order = SortOrder(order)

    def toggle_order(self) -> SortOrder:
        self.sort_order = self.sort_order.toggled()
        return self.sort_order

    @property
    def sorted_books(self) -> List[Book]:
        return sort_books(self.books, self.sort_key, self.sort_order)

    def search(self, client, term: str) -> List[Book]:
        """Search synchronously; a blank term leaves the session unchanged."""
        if not (term or "").strip():
            logger.info("Ignoring blank search")
            return self.sorted_books
        generation = self.begin_search(term)
        self.apply_results(generation, search_books(client, self.term, self.seed))
        return self.sorted_books

    async def search_async(self, client, term: str) -> List[Book]:
        """Search asynchronously; only the latest started search updates the batch."""
        if not (term or "").strip():
            logger.info("Ignoring blank search")
            return self.sorted_books
        generation = self.begin_search(term)
        books = await search_books_async(client, self.term, self.seed)
        self.apply_results(generation, books)
        return self.sorted_books
