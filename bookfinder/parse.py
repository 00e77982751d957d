"""Parse and normalize Open Library search responses."""
import hashlib
import logging
import math
from typing import Dict, Any, Iterable, List, Optional

from bookfinder.config import Config
from bookfinder.models import Book, UNKNOWN_YEAR

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
DEFAULT_SUBJECT = "General"

MAX_RATING = 5.0
FILLER_PAGES_MIN = 100
FILLER_PAGES_SPAN = 500


def cover_url(cover_id: Any, base_url: Optional[str] = None) -> Optional[str]:
    """
    Build the medium-size cover image URL for a cover identifier.

    Args:
        cover_id: ``cover_i`` value from a search document
        base_url: Covers host (defaults to the configured one)

    Returns:
        Image URL, or None when there is no cover identifier
    """
    if not cover_id:
        return None
    base = (base_url or Config.OPENLIBRARY_COVERS_URL).rstrip("/")
    return f"{base}/b/id/{cover_id}-M.jpg"


def filler_fraction(book_id: str, field: str, seed: int = 0) -> float:
    """
    Stable pseudo-random fraction in [0, 1) for a record.

    The same id, field and seed always give the same value, so a batch
    normalized twice fills in missing data identically.
    """
    digest = hashlib.sha256(f"{seed}:{field}:{book_id}".encode("utf-8")).digest()
    # 48 bits keeps the division exact in a float
    return int.from_bytes(digest[:6], "big") / float(1 << 48)


def filler_rating(book_id: str, seed: int = 0) -> float:
    return filler_fraction(book_id, "rating", seed) * MAX_RATING


def filler_pages(book_id: str, seed: int = 0) -> int:
    return FILLER_PAGES_MIN + int(filler_fraction(book_id, "pages", seed) * FILLER_PAGES_SPAN)


def _first(value: Any) -> Optional[Any]:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value or None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _rating(raw: Any, book_id: str, seed: int) -> float:
    if not _is_number(raw) or not raw or (isinstance(raw, float) and math.isnan(raw)):
        return filler_rating(book_id, seed)
    # Clamp before float() so oversized ints never overflow
    return float(min(max(raw, 0), MAX_RATING))


def _pages(raw: Any, book_id: str, seed: int) -> int:
    if _is_number(raw) and raw > 0 and (isinstance(raw, int) or raw.is_integer()):
        return int(raw)
    return filler_pages(book_id, seed)


def _publish_year(raw: Any):
    if isinstance(raw, float):
        return int(raw) if raw and math.isfinite(raw) else UNKNOWN_YEAR
    if _is_number(raw) and raw:
        return raw
    if isinstance(raw, str) and raw.strip().isdecimal():
        try:
            return int(raw.strip())
        except ValueError:
            # more digits than int() accepts
            return UNKNOWN_YEAR
    return UNKNOWN_YEAR


def parse_book(entry: Dict[str, Any], seed: int = 0, position: int = 0) -> Book:
    """
    Map a single search document to a Book.

    Missing or malformed fields are defaulted, never rejected.

    Args:
        entry: One element of the ``docs`` array
        seed: Seed mixed into filler rating and page values
        position: Index of the entry in its batch, used for a fallback id

    Returns:
        Book object
    """
    book_id = entry.get("key") or f"/unknown/{position}"
    book_id = str(book_id)

    author = _first(entry.get("author_name"))
    subject = _first(entry.get("subject"))
    isbn = _first(entry.get("isbn"))

    return Book(
        id=book_id,
        title=str(entry.get("title") or UNKNOWN_TITLE),
        author=str(author) if author else UNKNOWN_AUTHOR,
        publish_year=_publish_year(entry.get("first_publish_year")),
        rating=_rating(entry.get("ratings_average"), book_id, seed),
        pages=_pages(entry.get("number_of_pages_median"), book_id, seed),
        cover_url=cover_url(entry.get("cover_i")),
        subject=str(subject) if subject else DEFAULT_SUBJECT,
        isbn=str(isbn) if isbn else None,
    )


def normalize(entries: Iterable[Dict[str, Any]], seed: int = 0) -> List[Book]:
    """
    Normalize raw search documents, one Book per entry, in input order.

    Entries that are not JSON objects are treated as empty documents.
    """
    books = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.debug(f"Non-object search document at position {position}")
            entry = {}
        books.append(parse_book(entry, seed=seed, position=position))
    return books


def parse_books_response(response_json: Dict[str, Any], seed: int = 0) -> List[Book]:
    """
    Parse full Open Library search response.

    Args:
        response_json: Complete API response JSON

    Returns:
        List of Book objects (empty if no docs found)
    """
    docs = response_json.get("docs") or []
    return normalize(docs, seed=seed)


def deduplicate_books(books: List[Book]) -> List[Book]:
    """
    Remove duplicate books by ID, keeping the first occurrence.

    Args:
        books: List of Book objects

    Returns:
        Deduplicated list of books
    """
    seen_ids = set()
    unique_books = []

    for book in books:
        if book.id not in seen_ids:
            seen_ids.add(book.id)
            unique_books.append(book)

    return unique_books
