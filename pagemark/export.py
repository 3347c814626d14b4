"""
Plain text and Markdown export of notes.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pagemark.storage.records import Book, Note, utc_now

# Medium date + short time
DISPLAY_FORMAT = "%b %d, %Y at %H:%M"


class ExportFormat(str, Enum):
    PLAIN_TEXT = "txt"
    MARKDOWN = "md"


def format_display_date(value: datetime) -> str:
    return value.astimezone().strftime(DISPLAY_FORMAT)


def _page_suffix(note: Note) -> str:
    return f" (Page {note.page_number})" if note.page_number is not None else ""


def export_notes(
    book: Book,
    notes: List[Note],
    fmt: ExportFormat = ExportFormat.PLAIN_TEXT,
    exported_at: Optional[datetime] = None,
) -> str:
    """
    Render all of a book's notes as one document.

    Notes are written in the order given; pass
    ``repo.get_notes_for_book(book.id)`` for newest first.

    Args:
        book: The book the notes belong to
        notes: Notes to include
        fmt: Output format
        exported_at: Footer timestamp (now if omitted)
    """
    fmt = ExportFormat(fmt)
    exported = format_display_date(exported_at or utc_now())

    if fmt is ExportFormat.MARKDOWN:
        parts = [
            f"# {book.title}",
            "",
            f"**Author:** {book.author}  ",
            f"**Year:** {book.year}",
            "",
            "## Notes",
            "",
        ]
        for index, note in enumerate(notes, start=1):
            parts += [
                f"### {index}. {note.title}{_page_suffix(note)}",
                "",
                f"*Created: {format_display_date(note.date_created)}*",
                "",
                note.extracted_text,
                "",
                "---",
                "",
            ]
        parts.append(f"*Exported on {exported}*")
    else:
        parts = [
            book.title,
            f"by {book.author} ({book.year})",
            "",
            "Notes Export",
            "============",
            "",
        ]
        for index, note in enumerate(notes, start=1):
            parts += [
                f"[{index}] {note.title}{_page_suffix(note)}",
                f"Created: {format_display_date(note.date_created)}",
                "",
                note.extracted_text,
                "",
                "---",
                "",
            ]
        parts.append(f"Exported on {exported}")

    return "\n".join(parts)


def export_note(note: Note, fmt: ExportFormat = ExportFormat.PLAIN_TEXT) -> str:
    """Render a single note for sharing."""
    fmt = ExportFormat(fmt)
    created = format_display_date(note.date_created)

    if fmt is ExportFormat.MARKDOWN:
        parts = [f"# {note.title}"]
        if note.page_number is not None:
            parts.append(f"**Page:** {note.page_number}")
        parts += ["", note.extracted_text, "", "---", f"*Created: {created}*"]
    else:
        parts = [note.title]
        if note.page_number is not None:
            parts.append(f"Page: {note.page_number}")
        parts += ["", note.extracted_text, "", f"Created: {created}"]

    return "\n".join(parts)
