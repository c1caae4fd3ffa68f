"""Data model classes for DBEN.

This module contains only the dataclass definitions for the rows stored on the
hosted platform, plus the enumerations they draw from. Queries live in
``dben.models.queries``; business rules live in ``dben.services``.

Each class has a ``from_row`` constructor that accepts the dict returned by the
platform client, ignores columns it does not know about, and turns joined
foreign-key lookups into summary objects.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

from dateutil.parser import isoparse


CONDITIONS = ('excellent', 'good', 'fair', 'poor')
AVAILABILITY_TYPES = ('lend', 'swap', 'giveaway')
EXCHANGE_STATUSES = ('pending', 'accepted', 'completed', 'cancelled')
TERMINAL_STATUSES = ('completed', 'cancelled')

CONDITION_LABELS = {
    'excellent': 'Excellent',
    'good': 'Good',
    'fair': 'Fair',
    'poor': 'Poor',
}

AVAILABILITY_LABELS = {
    'lend': 'Lend',
    'swap': 'Swap',
    'giveaway': 'Giveaway',
}


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a platform timestamp (ISO 8601 string) into a datetime."""
    if value is None or isinstance(value, datetime):
        return value
    if not value:
        return None
    return isoparse(value)


def _known_columns(cls, row: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in row.items() if key in names}


@dataclass
class ProfileSummary:
    """Joined profile columns used for display next to books and exchanges."""
    username: str = ""
    full_name: Optional[str] = None
    reputation_score: int = 0

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['ProfileSummary']:
        if not row:
            return None
        return cls(**_known_columns(cls, row))


@dataclass
class BookSummary:
    title: str = ""
    author: str = ""

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional['BookSummary']:
        if not row:
            return None
        return cls(**_known_columns(cls, row))


@dataclass
class Profile:
    """Public profile of a registered user."""
    id: str
    username: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    location_name: Optional[str] = None
    reputation_score: int = 0
    total_exchanges: int = 0
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Profile':
        data = _known_columns(cls, row)
        data['created_at'] = parse_timestamp(data.get('created_at'))
        data['updated_at'] = parse_timestamp(data.get('updated_at'))
        return cls(**data)


@dataclass
class Book:
    """A book listed by its owner for lending, swapping or giving away."""
    id: str
    owner_id: str
    title: str
    author: str
    condition: str = 'good'  # one of CONDITIONS
    availability_type: str = 'lend'  # one of AVAILABILITY_TYPES
    is_available: bool = True
    isbn: Optional[str] = None
    genre: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Joined from profiles!books_owner_id_fkey when requested
    owner: Optional[ProfileSummary] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Book':
        data = _known_columns(cls, row)
        data['owner'] = ProfileSummary.from_row(row.get('owner'))
        data['created_at'] = parse_timestamp(data.get('created_at'))
        data['updated_at'] = parse_timestamp(data.get('updated_at'))
        return cls(**data)


@dataclass
class Exchange:
    """A request by one user to borrow, swap or receive another user's book."""
    id: str
    book_id: str
    requester_id: str
    owner_id: str
    status: str = 'pending'  # one of EXCHANGE_STATUSES
    exchange_type: str = 'lend'  # copied from the book's availability_type
    swap_book_id: Optional[str] = None
    message: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    # Joined lookups
    book: Optional[BookSummary] = None
    requester: Optional[ProfileSummary] = None
    owner: Optional[ProfileSummary] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Exchange':
        data = _known_columns(cls, row)
        data['book'] = BookSummary.from_row(row.get('book'))
        data['requester'] = ProfileSummary.from_row(row.get('requester'))
        data['owner'] = ProfileSummary.from_row(row.get('owner'))
        for key in ('created_at', 'updated_at', 'completed_at'):
            data[key] = parse_timestamp(data.get(key))
        return cls(**data)


@dataclass
class Rating:
    """Rating left after an exchange. Declared for completeness; no page uses it yet."""
    id: str
    exchange_id: str
    rater_id: str
    rated_id: str
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Rating':
        data = _known_columns(cls, row)
        data['created_at'] = parse_timestamp(data.get('created_at'))
        return cls(**data)
