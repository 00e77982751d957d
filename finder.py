#!/usr/bin/env python3
"""Book Finder CLI - search Open Library and sort the results."""
import argparse
import asyncio
import random
import sys
import json
from tabulate import tabulate
from bookfinder.client import OpenLibraryClient
from bookfinder.async_client import AsyncOpenLibraryClient
from bookfinder.config import Config
from bookfinder.models import SortKey, SortOrder
from bookfinder.pipeline import SearchSession
import logging

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


def build_session(args, config: Config) -> SearchSession:
    """Create a session with the requested ordering."""
    session = SearchSession(seed=config.FILLER_SEED if args.seed is None else args.seed)
    session.set_sort(args.sort, args.order)
    return session


def resolve_query(args, config: Config) -> str:
    """Use the given query, or a random popular title when none was given."""
    if args.query:
        return args.query
    query = random.choice(config.POPULAR_SEARCHES)
    logger.info(f"No query given, searching for: {query}")
    return query


async def search_books_async(args, config: Config):
    """Search for books using async client."""
    session = build_session(args, config)
    async with AsyncOpenLibraryClient(timeout=config.DEFAULT_TIMEOUT) as client:
        books = await session.search_async(client, resolve_query(args, config))
    report(session, books, args.format)


def search_books_sync(args, config: Config):
    """Search for books using sync client."""
    session = build_session(args, config)
    with OpenLibraryClient(timeout=config.DEFAULT_TIMEOUT) as client:
        books = session.search(client, resolve_query(args, config))
    report(session, books, args.format)


def report(session: SearchSession, books, format_type: str):
    if not books:
        logger.info(f"No books found for {session.term!r}")
        if format_type == "json":
            print("[]")
        return
    logger.info(f"{len(books)} books found, sorted by {session.sort_key.value} ({session.sort_order.value})")
    display_books(books, format_type)


def display_books(books, format_type: str):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["Title", "Author", "Year", "Rating", "Pages", "Subject"]
        rows = [
            [
                _truncate(book.title, 50),
                _truncate(book.author, 30),
                book.publish_year,
                book.rating_str,
                book.pages,
                _truncate(book.subject, 20)
            ]
            for book in books
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        print(json.dumps([book.to_dict() for book in books], indent=2))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.author} ({book.publish_year}) ★ {book.rating_str}")


def show_popular(args, config: Config):
    """Show suggested searches."""
    print("\nPopular searches:")
    for title in config.POPULAR_SEARCHES:
        print(f"  - {title}")
    print("\nExplore by genre:")
    for genre in config.GENRES:
        print(f"  - {genre}")
    print()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Finder - Open Library search CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search by title
  %(prog)s search "the hobbit"

  # Highest rated first
  %(prog)s search "dune" --sort rating --order desc

  # Random popular title, JSON output
  %(prog)s search --format json

  # Show suggestions
  %(prog)s popular
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("query", nargs="?", help="Title or topic (default: random popular title)")
    search_parser.add_argument("--sort", choices=[k.value for k in SortKey], default=SortKey.TITLE.value, help="Sort field (default: title)")
    search_parser.add_argument("--order", choices=[o.value for o in SortOrder], default=SortOrder.ASC.value, help="Sort order (default: asc)")
    search_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    search_parser.add_argument("--seed", type=int, help="Seed for filler ratings and page counts")
    search_parser.add_argument("--async", dest="use_async", action="store_true", help="Use async client")

    # Popular command
    subparsers.add_parser("popular", help="Show popular searches and genres")

    args = parser.parse_args()
    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    try:
        if args.command == "search":
            if args.use_async:
                asyncio.run(search_books_async(args, config))
            else:
                search_books_sync(args, config)

        elif args.command == "popular":
            show_popular(args, config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
