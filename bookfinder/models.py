"""Data models for books."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

UNKNOWN_YEAR = "Unknown"


@dataclass(frozen=True)
class Book:
    """Normalized book representation."""
    id: str
    title: str
    author: str
    publish_year: Union[int, str]
    rating: float
    pages: int
    cover_url: Optional[str]
    subject: str
    isbn: Optional[str]

    @property
    def year_known(self) -> bool:
        """True unless the publish year is the unknown marker."""
        return self.publish_year != UNKNOWN_YEAR

    @property
    def rating_str(self) -> str:
        """Format rating with one decimal place."""
        return f"{self.rating:.1f}"

    @property
    def pages_str(self) -> str:
        """Format page count for display."""
        return f"{self.pages} pages"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "publishYear": self.publish_year,
            "rating": self.rating,
            "pages": self.pages,
            "coverUrl": self.cover_url,
            "subject": self.subject,
            "isbn": self.isbn,
        }


class SortKey(str, Enum):
    """Fields a result batch can be ordered by."""
    TITLE = "title"
    AUTHOR = "author"
    PUBLISH_YEAR = "publishYear"
    RATING = "rating"
    PAGES = "pages"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC
