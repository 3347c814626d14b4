"""
Book and Note records.

Records are plain dataclasses owned by the LibraryRepository. Use
``Book.new`` / ``Note.new`` to create them: both trim their input, reject
blank required fields and assign a fresh id and creation timestamp.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pagemark.errors import RecordValidationError

# Short date + short time in the current locale
NOTE_TITLE_FORMAT = "%x %H:%M"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def default_note_title(created: datetime) -> str:
    """Title used when a note is saved without one."""
    return f"Note {created.astimezone().strftime(NOTE_TITLE_FORMAT)}"


def _required(value: str, field: str, record: str) -> str:
    value = (value or "").strip()
    if not value:
        raise RecordValidationError(field, record)
    return value


@dataclass
class Book:
    """A book in the library."""

    id: uuid.UUID
    author: str
    title: str
    year: str  # Free-form, not guaranteed numeric
    date_created: datetime

    @classmethod
    def new(cls, author: str, title: str, year: str) -> "Book":
        """
        Create a book with a fresh id.

        Raises:
            RecordValidationError: If author, title or year is blank
        """
        return cls(
            id=uuid.uuid4(),
            author=_required(author, "author", "Book"),
            title=_required(title, "title", "Book"),
            year=_required(year, "year", "Book"),
            date_created=utc_now(),
        )


@dataclass
class Note:
    """A passage captured from a book page."""

    id: uuid.UUID
    book_id: uuid.UUID
    extracted_text: str
    title: str
    date_created: datetime
    page_number: Optional[str] = None

    @classmethod
    def new(
        cls,
        book_id: uuid.UUID,
        extracted_text: str,
        title: str = "",
        page_number: Optional[str] = None,
    ) -> "Note":
        """
        Create a note with a fresh id.

        An empty title is replaced by "Note <short date/time>" using the
        note's own creation time. A blank page number is stored as None.

        Raises:
            RecordValidationError: If extracted_text is blank
        """
        text = _required(extracted_text, "extracted_text", "Note")
        created = utc_now()
        page = (page_number or "").strip() or None

        return cls(
            id=uuid.uuid4(),
            book_id=book_id,
            extracted_text=text,
            title=title if title else default_note_title(created),
            date_created=created,
            page_number=page,
        )
