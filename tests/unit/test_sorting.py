"""
Unit tests for book sort orders.
"""

import pytest

from pagemark.storage.records import Book
from pagemark.storage.sorting import BookSortOption, _parse_year, compare_years, sort_books


def _books(**columns):
    count = len(next(iter(columns.values())))
    defaults = {"author": ["A"] * count, "title": ["T"] * count, "year": ["2000"] * count}
    defaults.update(columns)
    return [
        Book.new(defaults["author"][i], defaults["title"][i], defaults["year"][i])
        for i in range(count)
    ]


class TestSortBooks:

    def test_by_year_numeric_then_text(self):
        books = _books(year=["2020", "1999", "abc", "2005"])
        result = sort_books(books, BookSortOption.YEAR)
        assert [b.year for b in result] == ["1999", "2005", "2020", "abc"]

    def test_by_year_is_numeric_not_lexical(self):
        books = _books(year=["1000", "999", "20"])
        result = sort_books(books, BookSortOption.YEAR)
        assert [b.year for b in result] == ["20", "999", "1000"]

    def test_by_author_ignores_case(self):
        books = _books(author=["carol", "Alice", "bob"])
        result = sort_books(books, BookSortOption.AUTHOR)
        assert [b.author for b in result] == ["Alice", "bob", "carol"]

    def test_by_title_ignores_case(self):
        books = _books(title=["the road", "Beloved", "an Ending"])
        result = sort_books(books, BookSortOption.TITLE)
        assert [b.title for b in result] == ["an Ending", "Beloved", "the road"]

    def test_equal_keys_keep_collection_order(self):
        books = _books(author=["Le Guin", "le guin", "LE GUIN"], title=["One", "Two", "Three"])
        result = sort_books(books, BookSortOption.AUTHOR)
        assert [b.title for b in result] == ["One", "Two", "Three"]

    def test_accepts_option_value(self):
        books = _books(year=["2001", "2000"])
        assert [b.year for b in sort_books(books, "year")] == ["2000", "2001"]

    def test_returns_new_list(self):
        books = _books(year=["2001", "2000"])
        sort_books(books, BookSortOption.YEAR)
        assert [b.year for b in books] == ["2001", "2000"]


class TestCompareYears:

    @pytest.mark.parametrize("a,b,expected", [
        ("1999", "2005", -1),
        (" 2005 ", "2005", 0),
        ("-50", "10", -1),
        ("2020", "abc", -1),
        ("ABC", "abc", 0),
        ("10", "9a", -1),
    ])
    def test_pairwise(self, a, b, expected):
        assert compare_years(a, b) == expected

    @pytest.mark.parametrize("value,expected", [
        ("1974", 1974),
        ("+12", 12),
        ("-50", -50),
        ("19th century", None),
        ("", None),
    ])
    def test_parse_year(self, value, expected):
        assert _parse_year(value) == expected
