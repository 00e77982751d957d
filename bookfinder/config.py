"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(value):
    return float(value) if value else None


class Config:
    """Application configuration."""

    # API
    OPENLIBRARY_BASE_URL = os.getenv("OPENLIBRARY_BASE_URL", "https://openlibrary.org")
    OPENLIBRARY_COVERS_URL = os.getenv("OPENLIBRARY_COVERS_URL", "https://covers.openlibrary.org")

    # Defaults
    SEARCH_LIMIT = int(os.getenv("BOOKFINDER_SEARCH_LIMIT", "20"))
    DEFAULT_TIMEOUT = _optional_float(os.getenv("BOOKFINDER_TIMEOUT"))
    FILLER_SEED = int(os.getenv("BOOKFINDER_FILLER_SEED", "0"))

    # Suggestions shown before the first search
    POPULAR_SEARCHES = [
        "The Great Gatsby",
        "To Kill a Mockingbird",
        "Pride and Prejudice",
        "The Catcher in the Rye",
        "1984",
        "Harry Potter",
    ]
    GENRES = ["Fiction", "Non-Fiction", "Science", "Biography", "History"]
