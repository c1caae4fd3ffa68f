"""Ownership checks for DBEN.

The hosted platform enforces row-level security; these checks decide which
controls a page shows and stop obviously disallowed operations before a remote
call is made.
"""

from typing import Optional


class PermissionDeniedError(Exception):
    """Raised when a user attempts an operation reserved for someone else."""


def is_book_owner(book, user_id: Optional[str]) -> bool:
    return bool(user_id) and book.owner_id == user_id


def can_edit_book(book, user_id: Optional[str]) -> bool:
    """Only the owner can delete a book or change its availability."""
    return is_book_owner(book, user_id)


def can_request_book(book, user_id: Optional[str]) -> bool:
    """Signed-in users can request available books they do not own."""
    if not user_id:
        return False
    return book.is_available and not is_book_owner(book, user_id)


def is_exchange_party(exchange, user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    return user_id in (exchange.owner_id, exchange.requester_id)


def can_respond_to_exchange(exchange, user_id: Optional[str]) -> bool:
    """Accepting or declining is reserved for the book's owner."""
    return bool(user_id) and exchange.owner_id == user_id


def can_complete_exchange(exchange, user_id: Optional[str]) -> bool:
    """Either party may mark an exchange as completed."""
    return is_exchange_party(exchange, user_id)


def can_edit_profile(profile, user_id: Optional[str]) -> bool:
    return bool(user_id) and profile.id == user_id
