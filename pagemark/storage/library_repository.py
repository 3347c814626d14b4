"""
Library Repository for Pagemark

Owns the Book and Note collections:
- Write-through persistence of each collection as one blob
- Cascade delete of a book's notes
- Date-descending note views and sorted book views
- Load report that surfaces corrupt stored data

Design Decisions:
1. Whole-collection blobs under two fixed keys
2. Memory changes only after the write succeeds
3. Book removal and note cascade are written in one transaction
4. Lookups return None instead of raising
"""

import copy
import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger
from pydantic import ValidationError

from pagemark.errors import PersistenceCorruptionError
from pagemark.settings import Settings, get_settings
from pagemark.storage.kv_store import KeyValueStore
from pagemark.storage.records import Book, Note
from pagemark.storage.schemas import (
    decode_books,
    decode_notes,
    encode_books,
    encode_notes,
)
from pagemark.storage.sorting import BookSortOption, sort_books

BOOKS_KEY = "SavedBooks"
NOTES_KEY = "SavedNotes"
CORRUPT_SUFFIX = ".corrupt"


class LoadStatus(str, Enum):
    """Outcome of loading one collection."""
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass
class CollectionLoad:
    """Load outcome for a single stored collection."""
    key: str
    status: LoadStatus
    count: int = 0
    error: Optional[str] = None
    backup_key: Optional[str] = None  # Where the unreadable blob was copied


@dataclass
class LoadReport:
    """Result of LibraryRepository.load()."""
    books: CollectionLoad
    notes: CollectionLoad

    @property
    def data_lost(self) -> bool:
        """True if any collection was reset because its blob was corrupt."""
        return LoadStatus.CORRUPT in (self.books.status, self.notes.status)

    @property
    def corrupt_keys(self) -> list[str]:
        return [c.key for c in (self.books, self.notes) if c.status is LoadStatus.CORRUPT]


def _by_newest(notes: list[Note]) -> list[Note]:
    return sorted(notes, key=lambda n: n.date_created, reverse=True)


class LibraryRepository:
    """
    Repository for Books and their Notes.

    Not a singleton: construct one per library and pass it to whatever
    needs it. Mutations are serialized by an internal lock.

    Usage:
        repo = LibraryRepository(KeyValueStore(sqlite_path=Path("library.db")))
        report = repo.load()
        if report.data_lost:
            warn_user(report.corrupt_keys)

        book = Book.new("Ursula K. Le Guin", "The Dispossessed", "1974")
        repo.add_book(book)
        repo.add_note(Note.new(book.id, "True journey is return."))
    """

    def __init__(
        self,
        store: KeyValueStore,
        books_key: str = BOOKS_KEY,
        notes_key: str = NOTES_KEY,
    ):
        """
        Initialize repository with empty collections.

        Call load() to restore persisted state.

        Args:
            store: Key-value persistence surface
            books_key: Key holding the Books blob
            notes_key: Key holding the Notes blob
        """
        self.store = store
        self.books_key = books_key
        self.notes_key = notes_key

        self._books: list[Book] = []
        self._notes: list[Note] = []
        self._lock = threading.RLock()
        self.last_load_report: Optional[LoadReport] = None

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self, strict: bool = False) -> LoadReport:
        """
        Restore both collections from the store.

        A missing key loads as an empty collection. A corrupt blob resets
        its collection to empty and is copied to ``<key>.corrupt`` so the
        next save does not destroy it; the report says so.

        Args:
            strict: Raise instead of resetting a corrupt collection

        Returns:
            LoadReport for both collections

        Raises:
            PersistenceCorruptionError: In strict mode, if a blob is corrupt.
                Nothing in memory changes in that case.
        """
        with self._lock:
            books, books_load = self._load_collection(self.books_key, decode_books, strict)
            notes, notes_load = self._load_collection(self.notes_key, decode_notes, strict)

            self._books = books
            self._notes = notes

            report = LoadReport(books=books_load, notes=notes_load)
            self.last_load_report = report

        logger.info(
            f"Library loaded: {len(books)} books ({books_load.status.value}), "
            f"{len(notes)} notes ({notes_load.status.value})"
        )
        return report

    def _load_collection(
        self,
        key: str,
        decode: Callable[[bytes], list],
        strict: bool,
    ) -> tuple[list, CollectionLoad]:
        blob = self.store.get(key)
        if blob is None:
            return [], CollectionLoad(key=key, status=LoadStatus.MISSING)

        try:
            records = decode(blob)
        except ValidationError as e:
            if strict:
                raise PersistenceCorruptionError(key, detail=str(e)) from e

            backup_key = f"{key}{CORRUPT_SUFFIX}"
            self.store.set(backup_key, blob)
            logger.warning(
                f"Stored collection '{key}' is corrupt ({e.error_count()} errors); "
                f"reset to empty, original kept under '{backup_key}'"
            )
            return [], CollectionLoad(
                key=key,
                status=LoadStatus.CORRUPT,
                error=str(e),
                backup_key=backup_key,
            )

        return records, CollectionLoad(key=key, status=LoadStatus.LOADED, count=len(records))

    def _commit(
        self,
        books: Optional[list[Book]] = None,
        notes: Optional[list[Note]] = None,
    ) -> None:
        """Persist the given collections, then make them current."""
        items = {}
        if books is not None:
            items[self.books_key] = encode_books(books)
        if notes is not None:
            items[self.notes_key] = encode_notes(notes)

        self.store.set_many(items)

        if books is not None:
            self._books = books
        if notes is not None:
            self._notes = notes

    # =========================================================================
    # Books
    # =========================================================================

    def add_book(self, book: Book) -> None:
        """Append a book and save."""
        with self._lock:
            self._commit(books=self._books + [copy.copy(book)])
        logger.debug(f"Added book {book.id}: {book.title!r}")

    def delete_book(self, book_id: uuid.UUID) -> bool:
        """
        Delete a book and every note that references it.

        Notes pointing at ``book_id`` are removed even if no such book
        exists, so this also clears orphans.

        Returns:
            True if a book was removed
        """
        with self._lock:
            books = [b for b in self._books if b.id != book_id]
            notes = [n for n in self._notes if n.book_id != book_id]
            removed = len(books) < len(self._books)
            removed_notes = len(self._notes) - len(notes)
            if not removed and not removed_notes:
                return False

            self._commit(books=books, notes=notes)

        logger.debug(f"Deleted book {book_id} ({removed_notes} notes cascaded)")
        return removed

    def delete_book_at(self, index: int) -> bool:
        """
        Delete the book at a position in get_all_books() order.

        An index outside the collection is a no-op.

        Returns:
            True if a book was removed
        """
        with self._lock:
            book = self.get_book_at(index)
            if book is None:
                return False
            return self.delete_book(book.id)

    def update_book(self, book: Book) -> bool:
        """
        Replace the stored book with the same id.

        Returns:
            True if a book was replaced
        """
        with self._lock:
            for i, existing in enumerate(self._books):
                if existing.id == book.id:
                    books = list(self._books)
                    books[i] = copy.copy(book)
                    self._commit(books=books)
                    return True
        return False

    def get_all_books(self) -> list[Book]:
        """All books in collection order (not a meaningful order)."""
        return [copy.copy(b) for b in self._books]

    def get_sorted_books(self, by: BookSortOption) -> list[Book]:
        """All books sorted by author, title or year."""
        return sort_books(self.get_all_books(), by)

    def get_book(self, book_id: uuid.UUID) -> Optional[Book]:
        """Get book by ID, or None."""
        for book in self._books:
            if book.id == book_id:
                return copy.copy(book)
        return None

    def get_book_at(self, index: int) -> Optional[Book]:
        """Get book by position in collection order, or None if out of range."""
        if 0 <= index < len(self._books):
            return copy.copy(self._books[index])
        return None

    def get_book_count(self) -> int:
        return len(self._books)

    # =========================================================================
    # Notes
    # =========================================================================

    def add_note(self, note: Note) -> None:
        """
        Append a note and save.

        The note's book is not required to exist.
        """
        with self._lock:
            if not any(b.id == note.book_id for b in self._books):
                logger.warning(f"Note {note.id} references unknown book {note.book_id}")
            self._commit(notes=self._notes + [copy.copy(note)])
        logger.debug(f"Added note {note.id} to book {note.book_id}")

    def delete_note(self, note_id: uuid.UUID) -> bool:
        """
        Delete a note by ID.

        Returns:
            True if a note was removed
        """
        with self._lock:
            notes = [n for n in self._notes if n.id != note_id]
            if len(notes) == len(self._notes):
                return False
            self._commit(notes=notes)
        logger.debug(f"Deleted note {note_id}")
        return True

    def delete_note_at(self, index: int, book_id: uuid.UUID) -> bool:
        """
        Delete the note at a position in get_notes_for_book(book_id).

        The index is resolved against the newest-first view of that
        book's notes, then the note is deleted by id. Out of range is a
        no-op.

        Returns:
            True if a note was removed
        """
        with self._lock:
            notes = self.get_notes_for_book(book_id)
            if not 0 <= index < len(notes):
                return False
            return self.delete_note(notes[index].id)

    def update_note(self, note: Note) -> bool:
        """
        Replace the stored note with the same id.

        Returns:
            True if a note was replaced
        """
        with self._lock:
            for i, existing in enumerate(self._notes):
                if existing.id == note.id:
                    notes = list(self._notes)
                    notes[i] = copy.copy(note)
                    self._commit(notes=notes)
                    return True
        return False

    def get_note(self, note_id: uuid.UUID) -> Optional[Note]:
        """Get note by ID, or None."""
        for note in self._notes:
            if note.id == note_id:
                return copy.copy(note)
        return None

    def get_notes_for_book(self, book_id: uuid.UUID) -> list[Note]:
        """A book's notes, newest first."""
        return _by_newest([copy.copy(n) for n in self._notes if n.book_id == book_id])

    def get_all_notes(self) -> list[Note]:
        """Every note across all books, newest first."""
        return _by_newest([copy.copy(n) for n in self._notes])

    def get_note_count(self, book_id: uuid.UUID) -> int:
        return sum(1 for n in self._notes if n.book_id == book_id)


def build_repository(settings: Optional[Settings] = None) -> LibraryRepository:
    """
    Create and load a repository from settings.

    The load report is kept on ``repo.last_load_report``.
    """
    settings = settings or get_settings()
    store = KeyValueStore(database_url=settings.database_url, echo=settings.database_echo)
    repo = LibraryRepository(store, books_key=settings.books_key, notes_key=settings.notes_key)
    repo.load(strict=settings.strict_load)
    return repo
