"""
Unit tests for the entity dataclasses and database configuration.

These tests verify row conversion, joined lookups, timestamp parsing and
the startup configuration checks.
"""

import pytest
from datetime import datetime, timezone


# ============================================================================
# Test entity conversion
# ============================================================================

class TestBookFromRow:
    """Tests for building Book objects from platform rows."""

    @pytest.mark.unit
    def test_joined_owner_becomes_summary(self):
        """The embedded owner lookup should become a ProfileSummary."""
        from dben.models import Book

        book = Book.from_row({
            'id': 'b1',
            'owner_id': 'u1',
            'title': '1984',
            'author': 'George Orwell',
            'availability_type': 'swap',
            'created_at': '2026-03-01T10:00:00+00:00',
            'owner': {'username': 'bob', 'full_name': None, 'reputation_score': 7},
        })

        assert book.owner.username == 'bob'
        assert book.owner.reputation_score == 7
        assert book.owner.display_name == 'bob'
        assert book.created_at == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)

    @pytest.mark.unit
    def test_unknown_columns_are_ignored(self):
        """Columns added on the platform should not break conversion."""
        from dben.models import Book

        book = Book.from_row({
            'id': 'b1', 'owner_id': 'u1', 'title': 'Dune', 'author': 'Frank Herbert',
            'search_vector': "'dune':1",
        })

        assert book.title == 'Dune'
        assert book.owner is None

    @pytest.mark.unit
    def test_defaults_for_missing_optional_columns(self):
        from dben.models import Book

        book = Book.from_row({'id': 'b1', 'owner_id': 'u1', 'title': 'Emma', 'author': 'Jane Austen'})

        assert book.condition == 'good'
        assert book.availability_type == 'lend'
        assert book.is_available is True
        assert book.genre is None


class TestExchangeFromRow:
    """Tests for building Exchange objects with their joined lookups."""

    @pytest.mark.unit
    def test_all_joins_are_converted(self):
        from dben.models import Exchange

        exchange = Exchange.from_row({
            'id': 'e1', 'book_id': 'b1', 'requester_id': 'u2', 'owner_id': 'u1',
            'status': 'completed', 'exchange_type': 'lend',
            'completed_at': '2026-03-02T12:30:00Z',
            'book': {'title': '1984', 'author': 'George Orwell'},
            'requester': {'username': 'alice', 'full_name': 'Alice Reader'},
            'owner': {'username': 'bob', 'full_name': None},
        })

        assert exchange.book.title == '1984'
        assert exchange.requester.display_name == 'Alice Reader'
        assert exchange.owner.display_name == 'bob'
        assert exchange.completed_at.tzinfo is not None
        assert exchange.is_terminal is True

    @pytest.mark.unit
    def test_missing_join_is_none(self):
        """A join that returns null (row hidden by security policy) stays None."""
        from dben.models import Exchange

        exchange = Exchange.from_row({
            'id': 'e1', 'book_id': 'b1', 'requester_id': 'u2', 'owner_id': 'u1',
            'book': None,
        })

        assert exchange.book is None
        assert exchange.is_terminal is False


class TestProfile:

    @pytest.mark.unit
    def test_display_name_prefers_full_name(self):
        from dben.models import Profile

        assert Profile(id='u1', username='alice', full_name='Alice Reader').display_name == 'Alice Reader'
        assert Profile(id='u1', username='alice').display_name == 'alice'

    @pytest.mark.unit
    def test_parse_timestamp_passthrough(self):
        from dben.models import parse_timestamp

        now = datetime.now(timezone.utc)
        assert parse_timestamp(now) is now
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None


# ============================================================================
# Test configuration
# ============================================================================

class TestPlatformConfig:
    """Tests for the required startup settings."""

    @pytest.mark.unit
    def test_missing_settings_raise_configuration_error(self, monkeypatch):
        from dben.models import ConfigurationError, load_platform_config

        monkeypatch.delenv('SUPABASE_URL', raising=False)
        monkeypatch.delenv('SUPABASE_ANON_KEY', raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            load_platform_config()

        assert 'SUPABASE_URL' in str(exc_info.value)
        assert 'SUPABASE_ANON_KEY' in str(exc_info.value)

    @pytest.mark.unit
    def test_blank_setting_counts_as_missing(self, monkeypatch):
        from dben.models import ConfigurationError, load_platform_config

        monkeypatch.setenv('SUPABASE_URL', 'https://project.supabase.co')
        monkeypatch.setenv('SUPABASE_ANON_KEY', '   ')

        with pytest.raises(ConfigurationError, match='SUPABASE_ANON_KEY'):
            load_platform_config()

    @pytest.mark.unit
    def test_settings_are_stripped(self, monkeypatch):
        from dben.models import load_platform_config

        monkeypatch.setenv('SUPABASE_URL', ' https://project.supabase.co ')
        monkeypatch.setenv('SUPABASE_ANON_KEY', 'anon-key\n')

        config = load_platform_config()

        assert config.url == 'https://project.supabase.co'
        assert config.anon_key == 'anon-key'

    @pytest.mark.unit
    def test_setup_database_uses_environment(self, monkeypatch):
        from dben.models import setup_database

        monkeypatch.setenv('SUPABASE_URL', 'https://project.supabase.co')
        monkeypatch.setenv('SUPABASE_ANON_KEY', 'anon-key')

        database = setup_database()

        assert database.config.url == 'https://project.supabase.co'

    @pytest.mark.unit
    def test_data_access_error_message(self):
        from dben.models import DataAccessError

        error = DataAccessError("load books", "connection refused")

        assert str(error) == "Could not load books: connection refused"
        assert error.action == "load books"
        assert str(DataAccessError("add book")) == "Could not add book"

    @pytest.mark.unit
    def test_data_access_error_keeps_platform_code(self):
        from dben.models import DataAccessError

        assert DataAccessError("request exchange", "duplicate key", code="23505").code == "23505"
        assert DataAccessError("load books").code is None


class TestRemoteDatabase:
    """Tests for per-request client lifetime."""

    @pytest.fixture
    def created(self, monkeypatch):
        from unittest.mock import MagicMock
        from dben.models import database

        clients = []

        def fake_create_client(url, key, options=None):
            clients.append(MagicMock())
            return clients[-1]

        monkeypatch.setattr(database, 'create_client', fake_create_client)
        return clients

    @pytest.mark.unit
    def test_connect_authenticates_and_closes(self, created):
        from dben.models import PlatformConfig, RemoteDatabase

        db = RemoteDatabase(PlatformConfig(url='https://project.supabase.co', anon_key='anon-key'))

        with db.connect_for({'access_token': 'tok'}) as client:
            client.postgrest.auth.assert_called_once_with('tok')
            client.postgrest.session.close.assert_not_called()

        created[0].postgrest.session.close.assert_called_once()
        created[0].auth.close.assert_called_once()

    @pytest.mark.unit
    def test_session_closed_when_work_fails(self, created):
        from dben.models import DataAccessError, PlatformConfig, RemoteDatabase

        db = RemoteDatabase(PlatformConfig(url='https://project.supabase.co', anon_key='anon-key'))

        with pytest.raises(DataAccessError):
            with db.connect_for(None):
                raise DataAccessError("load books", "connection refused")

        created[0].postgrest.auth.assert_not_called()
        created[0].postgrest.session.close.assert_called_once()
        created[0].auth.close.assert_called_once()
