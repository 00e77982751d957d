"""Client-side ordering of a result batch."""
from typing import Any, Callable, List, Sequence, Union

from bookfinder.models import Book, SortKey, SortOrder


def _year_key(book: Book):
    # Unknown years compare below every real year
    if not book.year_known:
        return (0, 0)
    return (1, book.publish_year)


_KEY_FUNCS = {
    SortKey.TITLE: lambda book: book.title.lower(),
    SortKey.AUTHOR: lambda book: book.author.lower(),
    SortKey.PUBLISH_YEAR: _year_key,
    SortKey.RATING: lambda book: book.rating,
    SortKey.PAGES: lambda book: book.pages,
}


def sort_key_func(key: Union[SortKey, str]) -> Callable[[Book], Any]:
    """Return the comparison key function for a sort field."""
    return _KEY_FUNCS[SortKey(key)]


def sort_books(
    books: Sequence[Book],
    key: Union[SortKey, str] = SortKey.TITLE,
    order: Union[SortOrder, str] = SortOrder.ASC
) -> List[Book]:
    """
    Order books by a field.

    Ascending order is a stable sort. Descending order is the ascending
    result reversed, so for keys without ties ``desc`` is exactly the
    mirror of ``asc``.

    Args:
        books: Books to order (left untouched)
        key: Field to order by
        order: ``asc`` or ``desc``

    Returns:
        New list of books
    """
    ordered = sorted(books, key=sort_key_func(key))
    if SortOrder(order) is SortOrder.DESC:
        ordered.reverse()
    return ordered
