"""
Unit tests for discover-page search and filtering.
"""

import pytest


def make_books():
    from dben.models import Book

    rows = [
        ('b1', '1984', 'George Orwell', 'Dystopian', 'swap'),
        ('b2', 'Animal Farm', 'George Orwell', 'Satire', 'lend'),
        ('b3', 'Dune', 'Frank Herbert', 'Science Fiction', 'lend'),
        ('b4', 'Emma', 'Jane Austen', None, 'giveaway'),
    ]
    return [
        Book(id=book_id, owner_id='u1', title=title, author=author, genre=genre, availability_type=kind)
        for book_id, title, author, genre, kind in rows
    ]


class TestMatchesQuery:

    @pytest.mark.unit
    def test_author_substring_is_case_insensitive(self):
        from dben.services import filter_books

        result = filter_books(make_books(), "orwell")

        assert [book.id for book in result] == ['b1', 'b2']

    @pytest.mark.unit
    def test_matches_title_and_genre(self):
        from dben.services import matches_query

        dune, = [book for book in make_books() if book.id == 'b3']

        assert matches_query(dune, "DUN")
        assert matches_query(dune, "fiction")
        assert not matches_query(dune, "orwell")

    @pytest.mark.unit
    def test_missing_genre_does_not_match_or_fail(self):
        from dben.services import matches_query

        emma, = [book for book in make_books() if book.id == 'b4']

        assert not matches_query(emma, "satire")

    @pytest.mark.unit
    def test_blank_query_matches_everything(self):
        from dben.services import filter_books

        assert len(filter_books(make_books(), "   ")) == 4


class TestAvailabilityFilter:

    @pytest.mark.unit
    def test_swap_filter_returns_only_swaps(self):
        from dben.services import filter_books

        result = filter_books(make_books(), availability='swap')

        assert result
        assert all(book.availability_type == 'swap' for book in result)

    @pytest.mark.unit
    def test_query_and_availability_combine(self):
        from dben.services import filter_books

        result = filter_books(make_books(), "orwell", 'lend')

        assert [book.title for book in result] == ['Animal Farm']

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "all", "borrow"])
    def test_unknown_availability_means_all(self, value):
        from dben.services import filter_books, normalize_availability

        assert normalize_availability(value) == 'all'
        assert len(filter_books(make_books(), availability=value)) == 4

    @pytest.mark.unit
    def test_order_is_preserved(self):
        from dben.services import filter_books

        books = list(reversed(make_books()))

        assert [book.id for book in filter_books(books, "george")] == ['b2', 'b1']
