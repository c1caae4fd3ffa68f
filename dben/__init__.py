"""DBEN - Decentralized Book Exchange Network.

This is the main package for DBEN, a community platform for lending, swapping
and giving away books, backed by a hosted Postgres platform.

Package Structure:
- dben.models: Entity dataclasses, remote database setup and queries
- dben.services: Business logic (permissions, exchange lifecycle, discovery)
- dben.auth: Hosted-platform authentication and request beforeware
- dben.components: UI components
"""

__version__ = "0.1.0"

# Re-export commonly used items for convenience
from .models import (
    # Entity classes
    Profile,
    Book,
    Exchange,
    Rating,
    # Database
    setup_database,
    ConfigurationError,
    DataAccessError,
)

from .services import (
    # Permissions
    PermissionDeniedError,
    can_request_book,
    can_respond_to_exchange,
    can_complete_exchange,
    # Exchanges
    ExchangeError,
    request_exchange,
    transition_exchange,
    exchange_actions,
    # Discovery
    filter_books,
)

__all__ = [
    '__version__',
    # Models
    'Profile',
    'Book',
    'Exchange',
    'Rating',
    'setup_database',
    'ConfigurationError',
    'DataAccessError',
    # Services
    'PermissionDeniedError',
    'can_request_book',
    'can_respond_to_exchange',
    'can_complete_exchange',
    'ExchangeError',
    'request_exchange',
    'transition_exchange',
    'exchange_actions',
    'filter_books',
]
