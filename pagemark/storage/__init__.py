"""
Storage Module for Pagemark

Local persistence for the library:
- Book and Note records
- SQLAlchemy-backed key-value store
- Repository with cascade delete and sorted views
"""

from pagemark.storage.records import Book, Note
from pagemark.storage.kv_store import KeyValueStore
from pagemark.storage.sorting import BookSortOption, sort_books
from pagemark.storage.library_repository import (
    LibraryRepository,
    LoadReport,
    LoadStatus,
    CollectionLoad,
    build_repository,
)

__all__ = [
    # Records
    "Book",
    "Note",
    # Key-value store
    "KeyValueStore",
    # Sorting
    "BookSortOption",
    "sort_books",
    # Repository
    "LibraryRepository",
    "LoadReport",
    "LoadStatus",
    "CollectionLoad",
    "build_repository",
]
