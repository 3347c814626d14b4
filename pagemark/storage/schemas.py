"""
Persisted format for the Book and Note collections.

Each collection is written as a single JSON array under its own key.
pydantic validates the array on the way back in, so a truncated or
hand-edited blob fails loudly instead of producing half-built records.
"""

import uuid
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, TypeAdapter

from pagemark.storage.records import Book, Note


class BookSchema(BaseModel):
    """Stored shape of a Book."""

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    author: str
    title: str
    year: str
    date_created: AwareDatetime

    @classmethod
    def from_record(cls, book: Book) -> "BookSchema":
        return cls(
            id=book.id,
            author=book.author,
            title=book.title,
            year=book.year,
            date_created=book.date_created,
        )

    def to_record(self) -> Book:
        return Book(
            id=self.id,
            author=self.author,
            title=self.title,
            year=self.year,
            date_created=self.date_created,
        )


class NoteSchema(BaseModel):
    """Stored shape of a Note."""

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID
    book_id: uuid.UUID
    extracted_text: str
    title: str
    page_number: Optional[str] = None
    date_created: AwareDatetime

    @classmethod
    def from_record(cls, note: Note) -> "NoteSchema":
        return cls(
            id=note.id,
            book_id=note.book_id,
            extracted_text=note.extracted_text,
            title=note.title,
            page_number=note.page_number,
            date_created=note.date_created,
        )

    def to_record(self) -> Note:
        return Note(
            id=self.id,
            book_id=self.book_id,
            extracted_text=self.extracted_text,
            title=self.title,
            page_number=self.page_number,
            date_created=self.date_created,
        )


_books_adapter = TypeAdapter(list[BookSchema])
_notes_adapter = TypeAdapter(list[NoteSchema])


def encode_books(books: list[Book]) -> bytes:
    return _books_adapter.dump_json([BookSchema.from_record(b) for b in books])


def decode_books(blob: bytes) -> list[Book]:
    """
    Decode a Books blob.

    Raises:
        pydantic.ValidationError: If the blob is not a valid Book array
    """
    return [s.to_record() for s in _books_adapter.validate_json(blob)]


def encode_notes(notes: list[Note]) -> bytes:
    return _notes_adapter.dump_json([NoteSchema.from_record(n) for n in notes])


def decode_notes(blob: bytes) -> list[Note]:
    """
    Decode a Notes blob.

    Raises:
        pydantic.ValidationError: If the blob is not a valid Note array
    """
    return [s.to_record() for s in _notes_adapter.validate_json(blob)]
