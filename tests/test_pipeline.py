"""Tests for the search pipeline and session state."""
import asyncio

import pytest
import requests

from bookfinder.client import OpenLibraryClient
from bookfinder.errors import EmptyQuery, NetworkError, ParseError
from bookfinder.models import SortKey, SortOrder
from bookfinder.pipeline import (
    SearchSession,
    search_books,
    search_books_async,
    validate_query,
)

DOCS = [
    {"key": "/works/1", "title": "the Hobbit", "author_name": ["J.R.R. Tolkien"], "first_publish_year": 1937},
    {"key": "/works/2", "title": "Animal Farm", "author_name": ["George Orwell"], "first_publish_year": 1945},
    {"key": "/works/1", "title": "the Hobbit (duplicate)"},
]


class FakeClient:
    def __init__(self, docs=None, error=None):
        self.docs = docs or []
        self.error = error
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.docs


class FakeAsyncClient(FakeClient):
    async def search(self, query):
        return FakeClient.search(self, query)


def test_validate_query():
    """Queries are trimmed and blank ones rejected."""
    assert validate_query("  dune  ") == "dune"
    for blank in ("", "   ", None):
        with pytest.raises(EmptyQuery):
            validate_query(blank)


def test_search_books_normalizes_and_deduplicates():
    """Search results are normalized and duplicate ids dropped."""
    client = FakeClient(DOCS)

    books = search_books(client, " hobbit ")

    assert client.queries == ["hobbit"]
    assert [b.id for b in books] == ["/works/1", "/works/2"]
    assert books[0].author == "J.R.R. Tolkien"


def test_search_books_empty_docs():
    """No docs means an empty batch."""
    assert search_books(FakeClient([]), "1984") == []


@pytest.mark.parametrize("error", [NetworkError("unreachable"), ParseError("bad body")])
def test_search_books_fails_soft(error, caplog):
    """Fetch failures are logged and give an empty batch."""
    books = search_books(FakeClient(error=error), "1984")

    assert books == []
    assert "1984" in caplog.text


def test_search_books_blank_query_never_fetches():
    """Blank queries never reach the client."""
    client = FakeClient(DOCS)
    assert search_books(client, "   ") == []
    assert client.queries == []


def test_search_books_async_fails_soft():
    """Async fetch failures give an empty batch."""
    books = asyncio.run(search_books_async(FakeAsyncClient(error=NetworkError("down")), "1984"))
    assert books == []


def test_session_search_replaces_batch_and_sorts():
    """Each search replaces the batch, which comes back sorted."""
    session = SearchSession()

    first = session.search(FakeClient(DOCS), "hobbit")
    assert [b.title for b in first] == ["Animal Farm", "the Hobbit"]
    assert session.term == "hobbit"
    assert not session.loading

    second = session.search(FakeClient([{"key": "/works/9", "title": "Emma"}]), "emma")
    assert [b.title for b in second] == ["Emma"]
    assert [b.id for b in session.books] == ["/works/9"]


def test_session_blank_search_keeps_state():
    """A blank search leaves the session untouched."""
    session = SearchSession()
    session.search(FakeClient(DOCS), "hobbit")
    client = FakeClient([])

    books = session.search(client, "  ")

    assert client.queries == []
    assert len(books) == 2
    assert session.term == "hobbit"


def test_session_failed_search_empties_batch():
    """A failed search leaves an empty batch."""
    session = SearchSession()
    session.search(FakeClient(DOCS), "hobbit")

    assert session.search(FakeClient(error=NetworkError("down")), "dune") == []
    assert session.books == []


def test_session_sort_controls():
    """Sort key and order changes reorder the batch."""
    session = SearchSession()
    session.search(FakeClient(DOCS), "classics")

    session.set_sort("publishYear", "desc")
    assert session.sort_key is SortKey.PUBLISH_YEAR
    assert [b.publish_year for b in session.sorted_books] == [1945, 1937]

    assert session.toggle_order() is SortOrder.ASC
    assert [b.publish_year for b in session.sorted_books] == [1937, 1945]


def test_session_drops_stale_results():
    """Results from a superseded search are ignored."""
    session = SearchSession()
    old = session.begin_search("hobbit")
    new = session.begin_search("dune")

    assert not session.apply_results(old, ["stale"])
    assert session.loading
    assert session.apply_results(new, [])
    assert not session.loading
    assert session.books == []


def test_session_async_latest_search_wins():
    """With overlapping async searches the latest one wins."""
    class SlowClient(FakeClient):
        def __init__(self, docs, delay):
            super().__init__(docs)
            self.delay = delay

        async def search(self, query):
            await asyncio.sleep(self.delay)
            return self.docs

    async def run(session):
        slow = SlowClient([{"key": "/works/old", "title": "Old"}], delay=0.05)
        fast = SlowClient([{"key": "/works/new", "title": "New"}], delay=0)
        await asyncio.gather(
            session.search_async(slow, "old"),
            session.search_async(fast, "new"),
        )

    session = SearchSession()
    asyncio.run(run(session))

    assert session.term == "new"
    assert [b.id for b in session.books] == ["/works/new"]


def test_search_books_transport_failure_with_real_client(monkeypatch):
    """A connection error inside the HTTP client ends as an empty batch."""
    client = OpenLibraryClient(base_url="https://openlibrary.example")

    def fail(url, params=None, timeout=None):
        raise requests.exceptions.ConnectionError("network down")

    monkeypatch.setattr(client.session, "get", fail)

    assert search_books(client, "1984") == []


def test_search_books_survives_oversized_numbers():
    """Huge numeric fields are normalized rather than raising."""
    books = search_books(FakeClient([{"key": "/works/1", "ratings_average": 10 ** 400}]), "x")

    assert len(books) == 1
    assert books[0].rating == 5.0
