"""Services package for DBEN.

This package contains business logic separated from routes and data access.
"""

from .permissions import (
    PermissionDeniedError,
    is_book_owner,
    can_edit_book,
    can_request_book,
    is_exchange_party,
    can_respond_to_exchange,
    can_complete_exchange,
    can_edit_profile,
)

from .exchanges import (
    TRANSITIONS,
    ACTION_LABELS,
    ACTION_TARGETS,
    ExchangeError,
    InvalidTransitionError,
    ExchangeConflictError,
    DuplicateRequestError,
    exchange_actions,
    validate_transition,
    request_exchange,
    transition_exchange,
)

from .discovery import (
    matches_query,
    normalize_availability,
    filter_books,
)

__all__ = [
    # Permissions
    'PermissionDeniedError',
    'is_book_owner',
    'can_edit_book',
    'can_request_book',
    'is_exchange_party',
    'can_respond_to_exchange',
    'can_complete_exchange',
    'can_edit_profile',
    # Exchanges
    'TRANSITIONS',
    'ACTION_LABELS',
    'ACTION_TARGETS',
    'ExchangeError',
    'InvalidTransitionError',
    'ExchangeConflictError',
    'DuplicateRequestError',
    'exchange_actions',
    'validate_transition',
    'request_exchange',
    'transition_exchange',
    # Discovery
    'matches_query',
    'normalize_availability',
    'filter_books',
]
