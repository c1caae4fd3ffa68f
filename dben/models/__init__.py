"""Models package for DBEN.

This package provides the entity dataclasses, remote database setup and the
query functions. Everything is re-exported here for convenience.
"""

# Entity classes
from .entities import (
    Profile,
    ProfileSummary,
    Book,
    BookSummary,
    Exchange,
    Rating,
    CONDITIONS,
    CONDITION_LABELS,
    AVAILABILITY_TYPES,
    AVAILABILITY_LABELS,
    EXCHANGE_STATUSES,
    TERMINAL_STATUSES,
    parse_timestamp,
)

# Remote database setup
from .database import (
    setup_database,
    load_platform_config,
    PlatformConfig,
    RemoteDatabase,
    ConfigurationError,
    DataAccessError,
)

# Queries
from .queries import (
    get_profile,
    update_profile,
    get_available_books,
    get_book,
    get_user_books,
    create_book,
    delete_book,
    set_book_availability,
    get_exchanges,
    get_exchange,
    find_open_exchanges,
    insert_exchange,
    update_exchange_status,
)

__all__ = [
    # Entities
    'Profile',
    'ProfileSummary',
    'Book',
    'BookSummary',
    'Exchange',
    'Rating',
    'CONDITIONS',
    'CONDITION_LABELS',
    'AVAILABILITY_TYPES',
    'AVAILABILITY_LABELS',
    'EXCHANGE_STATUSES',
    'TERMINAL_STATUSES',
    'parse_timestamp',
    # Database
    'setup_database',
    'load_platform_config',
    'PlatformConfig',
    'RemoteDatabase',
    'ConfigurationError',
    'DataAccessError',
    # Queries
    'get_profile',
    'update_profile',
    'get_available_books',
    'get_book',
    'get_user_books',
    'create_book',
    'delete_book',
    'set_book_availability',
    'get_exchanges',
    'get_exchange',
    'find_open_exchanges',
    'insert_exchange',
    'update_exchange_status',
]
