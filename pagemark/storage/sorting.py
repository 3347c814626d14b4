"""
Sort orders for the book list.

All orders are ascending and stable: books with equal keys keep the
order they had in the collection.
"""

import locale
import re
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, Optional

from pagemark.storage.records import Book

_INTEGER = re.compile(r"[+-]?[0-9]+")


class BookSortOption(str, Enum):
    """Book list orderings."""
    AUTHOR = "author"
    TITLE = "title"
    YEAR = "year"


def collation_key(value: str) -> str:
    """Locale-aware, case-insensitive sort key."""
    return locale.strxfrm(value.casefold())


def compare_text(a: str, b: str) -> int:
    """Compare two strings with the active locale, ignoring case."""
    ka, kb = collation_key(a), collation_key(b)
    return (ka > kb) - (ka < kb)


def _parse_year(value: str) -> Optional[int]:
    if _INTEGER.fullmatch(value):
        return int(value)
    return None


def compare_years(a: str, b: str) -> int:
    """
    Compare two free-form year strings.

    Both trimmed values numeric: numeric order. Otherwise text order,
    even when only one side is numeric, so "2020" sorts before "abc"
    and "10" sorts before "9a".
    """
    a, b = a.strip(), b.strip()
    year_a, year_b = _parse_year(a), _parse_year(b)

    if year_a is not None and year_b is not None:
        return (year_a > year_b) - (year_a < year_b)

    return compare_text(a, b)


def sort_books(books: Iterable[Book], option: BookSortOption) -> list[Book]:
    """
    Return a new list of books in the requested order.

    Args:
        books: Books in collection order
        option: Sort criterion
    """
    option = BookSortOption(option)

    if option is BookSortOption.AUTHOR:
        return sorted(books, key=lambda b: collation_key(b.author))
    if option is BookSortOption.TITLE:
        return sorted(books, key=lambda b: collation_key(b.title))

    return sorted(books, key=cmp_to_key(lambda x, y: compare_years(x.year, y.year)))
