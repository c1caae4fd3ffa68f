"""Query functions for DBEN.

Each function takes a platform client (see ``RemoteDatabase.client``) as its
first argument, issues one remote call and returns entity objects. Failures of
the remote call are logged and re-raised as ``DataAccessError``.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from supabase import PostgrestAPIError

from .database import DataAccessError
from .entities import (
    AVAILABILITY_TYPES, CONDITIONS, Book, Exchange, Profile
)

logger = logging.getLogger(__name__)

# Joined selects (PostgREST embedding through named foreign keys)
BOOK_WITH_OWNER = "*, owner:profiles!books_owner_id_fkey(username, reputation_score, full_name)"
EXCHANGE_WITH_DETAILS = (
    "*, "
    "book:books!exchanges_book_id_fkey(title, author), "
    "requester:profiles!exchanges_requester_id_fkey(username, full_name), "
    "owner:profiles!exchanges_owner_id_fkey(username, full_name)"
)

OPEN_STATUSES = ['pending', 'accepted']


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _execute(query, action: str) -> List[Dict[str, Any]]:
    """Run a built query and return its rows."""
    try:
        response = query.execute()
    except PostgrestAPIError as e:
        logger.error(f"Database error while trying to {action}: {e.message}", exc_info=True)
        raise DataAccessError(action, e.message or "", code=e.code) from e
    except httpx.HTTPError as e:
        logger.error(f"Network error while trying to {action}: {e}", exc_info=True)
        raise DataAccessError(action, str(e)) from e
    return response.data or []


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ----------------------------------------------------------------------------
# Profiles
# ----------------------------------------------------------------------------

def get_profile(client, profile_id: str) -> Optional[Profile]:
    """Fetch a profile by id, or None if it does not exist (yet)."""
    rows = _execute(
        client.table('profiles').select('*').eq('id', profile_id).limit(1),
        "load profile",
    )
    return Profile.from_row(rows[0]) if rows else None


def update_profile(client, profile_id: str, full_name: str = "", bio: str = "",
                   location_name: str = "") -> Optional[Profile]:
    """Update the editable profile fields. Blank values clear the field."""
    update_data = {
        'full_name': _blank_to_none(full_name),
        'bio': _blank_to_none(bio),
        'location_name': _blank_to_none(location_name),
        'updated_at': _now_iso(),
    }
    rows = _execute(
        client.table('profiles').update(update_data).eq('id', profile_id),
        "update profile",
    )
    return Profile.from_row(rows[0]) if rows else None


# ----------------------------------------------------------------------------
# Books
# ----------------------------------------------------------------------------

def get_available_books(client) -> List[Book]:
    """All books currently offered by anyone, newest first, with owner details."""
    rows = _execute(
        client.table('books')
        .select(BOOK_WITH_OWNER)
        .eq('is_available', True)
        .order('created_at', desc=True),
        "load books",
    )
    return [Book.from_row(row) for row in rows]


def get_book(client, book_id: str) -> Optional[Book]:
    rows = _execute(
        client.table('books').select(BOOK_WITH_OWNER).eq('id', book_id).limit(1),
        "load book",
    )
    return Book.from_row(rows[0]) if rows else None


def get_user_books(client, owner_id: str) -> List[Book]:
    """Books listed by one owner, newest first."""
    rows = _execute(
        client.table('books')
        .select('*')
        .eq('owner_id', owner_id)
        .order('created_at', desc=True),
        "load your books",
    )
    return [Book.from_row(row) for row in rows]


def create_book(client, owner_id: str, title: str, author: str, genre: str = "",
                condition: str = 'good', availability_type: str = 'lend',
                description: str = "") -> Book:
    """Insert a new book owned by ``owner_id``.

    Raises:
        ValueError: If title/author are blank or an enum value is unknown.
        DataAccessError: If the remote insert fails.
    """
    title = (title or "").strip()
    author = (author or "").strip()
    if not title or not author:
        raise ValueError("Title and author are required.")
    if condition not in CONDITIONS:
        raise ValueError(f"Unknown condition: {condition}")
    if availability_type not in AVAILABILITY_TYPES:
        raise ValueError(f"Unknown availability type: {availability_type}")

    book_data = {
        'owner_id': owner_id,
        'title': title,
        'author': author,
        'genre': _blank_to_none(genre),
        'condition': condition,
        'availability_type': availability_type,
        'description': _blank_to_none(description),
    }
    rows = _execute(client.table('books').insert(book_data), "add book")
    if not rows:
        raise DataAccessError("add book", "no row returned")
    book = Book.from_row(rows[0])
    logger.info(f"Book '{book.title}' listed by {owner_id}")
    return book


def delete_book(client, book_id: str, owner_id: str) -> bool:
    """Delete one of the owner's books. Returns False if nothing was deleted."""
    rows = _execute(
        client.table('books').delete().eq('id', book_id).eq('owner_id', owner_id),
        "delete book",
    )
    return bool(rows)


def set_book_availability(client, book_id: str, owner_id: str, is_available: bool) -> Optional[Book]:
    rows = _execute(
        client.table('books')
        .update({'is_available': is_available, 'updated_at': _now_iso()})
        .eq('id', book_id)
        .eq('owner_id', owner_id),
        "update book",
    )
    return Book.from_row(rows[0]) if rows else None


# ----------------------------------------------------------------------------
# Exchanges
# ----------------------------------------------------------------------------

def get_exchanges(client, profile_id: str, direction: str = 'received') -> List[Exchange]:
    """Exchanges where the profile is the owner ('received') or requester ('sent')."""
    column = 'owner_id' if direction == 'received' else 'requester_id'
    rows = _execute(
        client.table('exchanges')
        .select(EXCHANGE_WITH_DETAILS)
        .eq(column, profile_id)
        .order('created_at', desc=True),
        "load exchanges",
    )
    return [Exchange.from_row(row) for row in rows]


def get_exchange(client, exchange_id: str) -> Optional[Exchange]:
    rows = _execute(
        client.table('exchanges').select(EXCHANGE_WITH_DETAILS).eq('id', exchange_id).limit(1),
        "load exchange",
    )
    return Exchange.from_row(rows[0]) if rows else None


def find_open_exchanges(client, book_id: str, requester_id: str) -> List[Exchange]:
    """Pending or accepted exchanges a requester already has for a book."""
    rows = _execute(
        client.table('exchanges')
        .select('*')
        .eq('book_id', book_id)
        .eq('requester_id', requester_id)
        .in_('status', OPEN_STATUSES),
        "check existing requests",
    )
    return [Exchange.from_row(row) for row in rows]


def insert_exchange(client, book_id: str, requester_id: str, owner_id: str,
                    exchange_type: str, message: Optional[str] = None) -> Exchange:
    exchange_data = {
        'book_id': book_id,
        'requester_id': requester_id,
        'owner_id': owner_id,
        'exchange_type': exchange_type,
        'status': 'pending',
    }
    message = _blank_to_none(message)
    if message:
        exchange_data['message'] = message
    rows = _execute(client.table('exchanges').insert(exchange_data), "request exchange")
    if not rows:
        raise DataAccessError("request exchange", "no row returned")
    return Exchange.from_row(rows[0])


def update_exchange_status(client, exchange_id: str, expected_status: str,
                           new_status: str) -> Optional[Exchange]:
    """Move an exchange to ``new_status`` only if it is still in ``expected_status``.

    Returns the updated exchange, or None when no row matched (the status
    changed in the meantime, or row-level security refused the update).
    """
    update_data = {'status': new_status, 'updated_at': _now_iso()}
    if new_status == 'completed':
        update_data['completed_at'] = update_data['updated_at']
    rows = _execute(
        client.table('exchanges')
        .update(update_data)
        .eq('id', exchange_id)
        .eq('status', expected_status),
        "update exchange",
    )
    return Exchange.from_row(rows[0]) if rows else None
