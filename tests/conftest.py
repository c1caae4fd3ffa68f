"""
Shared pytest fixtures for DBEN tests.

This module provides test fixtures for:
- An in-memory fake of the hosted platform's query builder
- Mock platform authentication
- Test data factories
- A Starlette test client wired to the fake platform
"""

import pytest
import os
import re
import sys
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock
from typing import Any, Dict, List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Fake platform client
# ============================================================================

# alias:table!fkey(col, col)
EMBED_PATTERN = re.compile(r'(\w+):(\w+)!(\w+)\(([^)]*)\)')

TABLE_DEFAULTS = {
    'profiles': {'reputation_score': 0, 'total_exchanges': 0},
    'books': {'condition': 'good', 'availability_type': 'lend', 'is_available': True},
    'exchanges': {'status': 'pending'},
    'ratings': {},
}


class FakeStore:
    """Rows of every table, plus the clock used for created_at."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLE_DEFAULTS}
        self.clock = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.fail_with: Optional[Exception] = None

    def next_timestamp(self) -> str:
        self.clock += timedelta(seconds=1)
        return self.clock.isoformat()

    def add(self, table: str, **values) -> Dict[str, Any]:
        row = dict(TABLE_DEFAULTS.get(table, {}))
        row.update(values)
        row.setdefault('id', str(uuid.uuid4()))
        row.setdefault('created_at', self.next_timestamp())
        self.tables[table].append(row)
        return row

    def find(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        return next((row for row in self.tables[table] if row.get('id') == row_id), None)


class FakeQuery:
    """Chainable query mirroring the subset of the builder the app uses."""

    def __init__(self, store: FakeStore, table: str, operation: str, payload=None, columns: str = '*'):
        self.store = store
        self.table = table
        self.operation = operation
        self.payload = payload
        self.columns = columns
        self.filters = []
        self.ordering = None
        self.row_limit = None

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, size):
        self.row_limit = size
        return self

    def _matches(self, row) -> bool:
        return all(check(row) for check in self.filters)

    def _project(self, row) -> Dict[str, Any]:
        result = dict(row)
        for alias, target, fkey, cols in EMBED_PATTERN.findall(self.columns):
            column = fkey[len(self.table) + 1:-len('_fkey')]
            related = self.store.find(target, row.get(column))
            if related is None:
                result[alias] = None
            else:
                wanted = [c.strip() for c in cols.split(',') if c.strip()]
                result[alias] = {c: related.get(c) for c in wanted}
        return result

    def execute(self):
        if self.store.fail_with is not None:
            raise self.store.fail_with

        rows = self.store.tables[self.table]
        if self.operation == 'insert':
            data = self.store.add(self.table, **self.payload)
            return SimpleNamespace(data=[dict(data)])

        matched = [row for row in rows if self._matches(row)]
        if self.operation == 'update':
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched])
        if self.operation == 'delete':
            self.store.tables[self.table] = [row for row in rows if row not in matched]
            return SimpleNamespace(data=[dict(row) for row in matched])

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: row.get(column) or '', reverse=desc)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return SimpleNamespace(data=[self._project(row) for row in matched])


class FakeTable:
    def __init__(self, store: FakeStore, name: str):
        self.store = store
        self.name = name

    def select(self, columns='*'):
        return FakeQuery(self.store, self.name, 'select', columns=columns)

    def insert(self, data):
        return FakeQuery(self.store, self.name, 'insert', payload=data)

    def update(self, data):
        return FakeQuery(self.store, self.name, 'update', payload=data)

    def delete(self):
        return FakeQuery(self.store, self.name, 'delete')


class FakePlatformClient:
    """Stand-in for a platform client: table queries plus a mocked auth API."""

    def __init__(self, store: FakeStore):
        self.store = store
        self.auth = MagicMock()
        self.postgrest = MagicMock()

    def table(self, name: str) -> FakeTable:
        return FakeTable(self.store, name)


class FakeDatabase:
    """Replacement for RemoteDatabase that hands out clients over one store."""

    def __init__(self, store: FakeStore):
        self.store = store
        self.shared_client = FakePlatformClient(store)
        self.tokens: List[Optional[str]] = []
        self.open_connections = 0

    def client(self, access_token=None):
        self.tokens.append(access_token)
        return self.shared_client

    @contextmanager
    def connect(self, access_token=None):
        self.open_connections += 1
        try:
            yield self.client(access_token)
        finally:
            self.open_connections -= 1

    def connect_for(self, auth):
        return self.connect(auth.get('access_token') if auth else None)


@pytest.fixture
def store():
    """A fresh in-memory store for each test."""
    return FakeStore()


@pytest.fixture
def fake_db(store):
    return FakeDatabase(store)


@pytest.fixture
def client(fake_db):
    """A fake platform client over the test store."""
    return fake_db.shared_client


# ============================================================================
# Authentication Fixtures
# ============================================================================

def make_auth_response(user_id: str, email: str, username: str, full_name: str = None,
                       expires_in: int = 3600):
    """Build an object shaped like the auth service's session response."""
    metadata = {'username': username}
    if full_name:
        metadata['full_name'] = full_name
    return SimpleNamespace(
        session=SimpleNamespace(
            access_token=f"access-{user_id}",
            refresh_token=f"refresh-{user_id}",
            expires_at=int(time.time()) + expires_in,
        ),
        user=SimpleNamespace(id=user_id, email=email, user_metadata=metadata),
    )


@pytest.fixture
def auth_response():
    return make_auth_response


@pytest.fixture
def mock_auth_data() -> Dict[str, Any]:
    """Session auth data for a signed-in user."""
    return {
        'user_id': 'user-alice',
        'email': 'alice@example.com',
        'username': 'alice',
        'display_name': 'Alice Reader',
        'access_token': 'access-user-alice',
        'refresh_token': 'refresh-user-alice',
        'expires_at': int(time.time()) + 3600,
    }


# ============================================================================
# Test Data Factories
# ============================================================================

class TestDataFactory:
    """Factory for rows in the fake store."""

    def __init__(self, store: FakeStore):
        self.store = store

    def create_profile(self, username: str = None, **kwargs) -> Dict[str, Any]:
        username = username or f"reader{uuid.uuid4().hex[:6]}"
        return self.store.add(
            'profiles',
            id=kwargs.pop('id', f"user-{username}"),
            username=username,
            **kwargs
        )

    def create_book(self, owner_id: str, title: str = None, **kwargs) -> Dict[str, Any]:
        return self.store.add(
            'books',
            owner_id=owner_id,
            title=title or f"Test Book {uuid.uuid4().hex[:4]}",
            author=kwargs.pop('author', 'Test Author'),
            **kwargs
        )

    def create_exchange(self, book: Dict[str, Any], requester_id: str, **kwargs) -> Dict[str, Any]:
        return self.store.add(
            'exchanges',
            book_id=book['id'],
            requester_id=requester_id,
            owner_id=book['owner_id'],
            exchange_type=kwargs.pop('exchange_type', book.get('availability_type', 'lend')),
            **kwargs
        )


@pytest.fixture
def factory(store):
    """Provide access to the test data factory."""
    return TestDataFactory(store)


@pytest.fixture
def community(factory):
    """Two readers, Alice and Bob, with a few books each."""
    alice = factory.create_profile('alice', full_name='Alice Reader', reputation_score=12)
    bob = factory.create_profile('bob', reputation_score=3)
    books = {
        'nineteen_eighty_four': factory.create_book(
            bob['id'], '1984', author='George Orwell', genre='Dystopian', availability_type='swap'),
        'dune': factory.create_book(
            bob['id'], 'Dune', author='Frank Herbert', genre='Science Fiction', availability_type='lend'),
        'emma': factory.create_book(
            alice['id'], 'Emma', author='Jane Austen', genre='Classic', availability_type='giveaway'),
    }
    return SimpleNamespace(alice=alice, bob=bob, books=books)


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def web_app(monkeypatch, fake_db):
    """The FastHTML app wired to the fake platform."""
    import app as app_module
    from dben.auth import PlatformAuth

    monkeypatch.setattr(app_module, 'database', fake_db)
    monkeypatch.setattr(app_module, 'platform_auth', PlatformAuth(fake_db))
    return app_module


@pytest.fixture
def http(web_app):
    """Starlette test client that does not follow redirects."""
    from starlette.testclient import TestClient

    return TestClient(web_app.app, follow_redirects=False)


@pytest.fixture
def signed_in(http, fake_db, community, auth_response):
    """Test client with Alice signed in."""
    fake_db.shared_client.auth.sign_in_with_password.return_value = auth_response(
        community.alice['id'], 'alice@example.com', 'alice')
    response = http.post('/auth/login', data={'email': 'alice@example.com', 'password': 'secret'})
    assert response.status_code == 303
    return http
