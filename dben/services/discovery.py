"""Search and filtering for the discover page."""

from typing import Iterable, List, Optional

from dben.models.entities import AVAILABILITY_TYPES


def matches_query(book, query: str) -> bool:
    """Case-insensitive substring match against title, author or genre."""
    query = (query or "").strip().lower()
    if not query:
        return True
    return (
        query in (book.title or "").lower()
        or query in (book.author or "").lower()
        or query in (book.genre or "").lower()
    )


def normalize_availability(availability: Optional[str]) -> str:
    """Return a known availability type, or 'all' for anything else."""
    if availability in AVAILABILITY_TYPES:
        return availability
    return 'all'


def filter_books(books: Iterable, query: str = "", availability: str = 'all') -> List:
    """Filter books by search query and availability type, keeping their order."""
    availability = normalize_availability(availability)
    filtered = [book for book in books if matches_query(book, query)]
    if availability != 'all':
        filtered = [book for book in filtered if book.availability_type == availability]
    return filtered
