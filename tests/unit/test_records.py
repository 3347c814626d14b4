"""
Unit tests for Book and Note records.
"""

import uuid

import pytest

from pagemark.errors import RecordValidationError
from pagemark.storage.records import Book, Note, default_note_title


class TestBook:
    """Tests for Book.new."""

    def test_trims_fields_and_assigns_identity(self):
        book = Book.new("  Italo Calvino ", "Invisible Cities\n", " 1972 ")

        assert book.author == "Italo Calvino"
        assert book.title == "Invisible Cities"
        assert book.year == "1972"
        assert isinstance(book.id, uuid.UUID)
        assert book.date_created.tzinfo is not None

    def test_ids_are_unique(self):
        ids = {Book.new("A", "B", "2000").id for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("author,title,year,field", [
        ("", "Title", "2000", "author"),
        ("Author", "   ", "2000", "title"),
        ("Author", "Title", "\n", "year"),
    ])
    def test_rejects_blank_fields(self, author, title, year, field):
        with pytest.raises(RecordValidationError) as exc_info:
            Book.new(author, title, year)

        assert exc_info.value.field == field
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_year_is_free_form(self):
        assert Book.new("Anon", "Beowulf", "c. 1000").year == "c. 1000"


class TestNote:
    """Tests for Note.new."""

    def test_empty_title_gets_date_stamp(self):
        note = Note.new(uuid.uuid4(), "Some passage")

        assert note.title.startswith("Note ")
        assert note.title == default_note_title(note.date_created)
        assert len(note.title) > len("Note ")

    def test_supplied_title_kept_verbatim(self):
        note = Note.new(uuid.uuid4(), "Some passage", title="  On walls ")
        assert note.title == "  On walls "

    def test_text_is_trimmed_and_required(self):
        assert Note.new(uuid.uuid4(), "\n passage \n").extracted_text == "passage"

        with pytest.raises(RecordValidationError) as exc_info:
            Note.new(uuid.uuid4(), "   \n ")
        assert exc_info.value.field == "extracted_text"

    def test_blank_page_number_is_none(self):
        book_id = uuid.uuid4()

        assert Note.new(book_id, "text").page_number is None
        assert Note.new(book_id, "text", page_number="  ").page_number is None
        assert Note.new(book_id, "text", page_number=" 42 ").page_number == "42"

    def test_keeps_book_reference(self):
        book = Book.new("Octavia Butler", "Kindred", "1979")
        note = Note.new(book.id, "passage")

        assert note.book_id == book.id
        assert note.id != book.id
