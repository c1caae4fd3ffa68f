"""Exchange lifecycle for DBEN.

States and transitions::

    pending --accept--> accepted --complete--> completed
    pending --decline-> cancelled

Only the book's owner may accept or decline; either party may complete.
Status changes are applied as a compare-and-set on the current status, so two
clients racing on the same exchange cannot silently overwrite each other: the
loser gets an ``ExchangeConflictError``.
"""

import logging
from typing import List, Optional

from dben.models import queries
from dben.models.database import DataAccessError
from dben.models.entities import EXCHANGE_STATUSES

from .permissions import (
    PermissionDeniedError,
    can_complete_exchange,
    can_request_book,
    can_respond_to_exchange,
    is_book_owner,
)

logger = logging.getLogger(__name__)

# Postgres unique_violation, raised by the index on open requests per (book, requester)
UNIQUE_VIOLATION = "23505"

# target status -> (required current status, action name)
TRANSITIONS = {
    'accepted': ('pending', 'accept'),
    'cancelled': ('pending', 'decline'),
    'completed': ('accepted', 'complete'),
}

ACTION_LABELS = {
    'accept': 'Accept',
    'decline': 'Decline',
    'complete': 'Mark as Completed',
}

ACTION_TARGETS = {action: target for target, (_, action) in TRANSITIONS.items()}


class ExchangeError(Exception):
    """Base class for exchange workflow errors."""


class InvalidTransitionError(ExchangeError):
    """The requested status change is not allowed from the current status."""


class ExchangeConflictError(ExchangeError):
    """The exchange changed on the server before the update was applied."""


class DuplicateRequestError(ExchangeError):
    """The requester already has an open request for this book."""


def exchange_actions(exchange, viewer_id: Optional[str]) -> List[str]:
    """Actions the viewer may take on an exchange, in display order."""
    if exchange.status == 'pending' and can_respond_to_exchange(exchange, viewer_id):
        return ['accept', 'decline']
    if exchange.status == 'accepted' and can_complete_exchange(exchange, viewer_id):
        return ['complete']
    return []


def validate_transition(exchange, actor_id: Optional[str], new_status: str) -> None:
    """Check that ``actor_id`` may move ``exchange`` to ``new_status``.

    Raises:
        InvalidTransitionError: Unknown status or illegal move.
        PermissionDeniedError: The actor is not allowed to make this move.
    """
    if new_status not in EXCHANGE_STATUSES or new_status not in TRANSITIONS:
        raise InvalidTransitionError(f"Cannot move an exchange to '{new_status}'.")

    required_status, action = TRANSITIONS[new_status]
    if exchange.status != required_status:
        raise InvalidTransitionError(
            f"Cannot {action} an exchange that is {exchange.status}."
        )

    if action in ('accept', 'decline'):
        allowed = can_respond_to_exchange(exchange, actor_id)
    else:
        allowed = can_complete_exchange(exchange, actor_id)
    if not allowed:
        raise PermissionDeniedError(f"You are not allowed to {action} this exchange.")


def request_exchange(client, book, requester_id: str, message: Optional[str] = None):
    """Create a pending exchange request for ``book``.

    The exchange type is copied from the book's availability type.

    Raises:
        PermissionDeniedError: Own book, or the book is not available.
        DuplicateRequestError: The requester already has an open request for it.
        DataAccessError: If a remote call fails.
    """
    if is_book_owner(book, requester_id):
        raise PermissionDeniedError("You cannot request your own book.")
    if not can_request_book(book, requester_id):
        raise PermissionDeniedError("This book is not available for exchange.")

    if queries.find_open_exchanges(client, book.id, requester_id):
        raise DuplicateRequestError("You already have an open request for this book.")

    try:
        exchange = queries.insert_exchange(
            client,
            book_id=book.id,
            requester_id=requester_id,
            owner_id=book.owner_id,
            exchange_type=book.availability_type,
            message=message,
        )
    except DataAccessError as e:
        if e.code == UNIQUE_VIOLATION:
            raise DuplicateRequestError("You already have an open request for this book.") from e
        raise
    logger.info(f"Exchange {exchange.id} requested for book {book.id} by {requester_id}")
    return exchange


def transition_exchange(client, exchange_id: str, actor_id: str, new_status: str):
    """Apply a status change to an exchange.

    Raises:
        InvalidTransitionError: Exchange missing, or the move is illegal.
        PermissionDeniedError: The actor may not make this move.
        ExchangeConflictError: The status changed before the update landed.
        DataAccessError: If a remote call fails.
    """
    exchange = queries.get_exchange(client, exchange_id)
    if exchange is None:
        raise InvalidTransitionError("Exchange not found.")

    validate_transition(exchange, actor_id, new_status)

    updated = queries.update_exchange_status(client, exchange.id, exchange.status, new_status)
    if updated is None:
        logger.warning(
            f"Status conflict on exchange {exchange.id}: expected {exchange.status}, "
            f"wanted {new_status} (actor {actor_id})"
        )
        raise ExchangeConflictError(
            "This exchange was updated by someone else. Refresh to see its current status."
        )

    logger.info(f"Exchange {exchange.id} moved {exchange.status} -> {new_status} by {actor_id}")
    return updated
