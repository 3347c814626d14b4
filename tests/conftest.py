"""
Pytest configuration and fixtures for Pagemark tests.
"""

import io
import sys
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pagemark.capture.ocr_engine import OCREngine, OCRResult
from pagemark.errors import OCREngineError
from pagemark.storage import Book, KeyValueStore, LibraryRepository, Note


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def kv_store():
    """In-memory SQLite key-value store."""
    store = KeyValueStore()
    yield store
    store.close()


@pytest.fixture
def repo(kv_store) -> LibraryRepository:
    """Empty, loaded repository on an in-memory store."""
    repository = LibraryRepository(kv_store)
    repository.load()
    return repository


@pytest.fixture
def sample_books() -> List[Book]:
    return [
        Book.new("Ursula K. Le Guin", "The Dispossessed", "1974"),
        Book.new("octavia butler", "Kindred", "1979"),
        Book.new("Italo Calvino", "Invisible Cities", "1972"),
    ]


BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_note(book: Book, text: str, minutes: int = 0, page_number=None) -> Note:
    """Note created at BASE_TIME + minutes, so ordering is deterministic."""
    note = Note.new(book.id, text, page_number=page_number)
    return replace(note, date_created=BASE_TIME + timedelta(minutes=minutes))


@pytest.fixture
def populated_repo(repo, sample_books) -> LibraryRepository:
    """Repository with three books; the first two have notes."""
    dispossessed, kindred, _ = sample_books
    for book in sample_books:
        repo.add_book(book)

    repo.add_note(make_note(dispossessed, "True journey is return.", minutes=1, page_number="386"))
    repo.add_note(make_note(dispossessed, "You cannot buy the revolution.", minutes=5))
    repo.add_note(make_note(dispossessed, "To be whole is to be part.", minutes=3))
    repo.add_note(make_note(kindred, "I lost an arm on my last trip home.", minutes=2, page_number="9"))
    return repo


# =============================================================================
# Image Fixtures
# =============================================================================

@pytest.fixture
def sample_page_image() -> Image.Image:
    """Blank page-sized image."""
    return Image.new("RGB", (600, 800), color=(250, 250, 245))


@pytest.fixture
def sample_page_bytes(sample_page_image) -> bytes:
    buffer = io.BytesIO()
    sample_page_image.save(buffer, format="PNG")
    return buffer.getvalue()


# =============================================================================
# OCR Engine Fakes
# =============================================================================

class StaticOCREngine(OCREngine):
    """Returns fixed lines for any image."""

    name = "static"

    def __init__(self, lines: List[str]):
        self.lines = lines
        self.calls = 0

    def recognize(self, image) -> OCRResult:
        self.calls += 1
        return OCRResult(lines=list(self.lines), engine_used=self.name)


class FailingOCREngine(OCREngine):
    """Always fails like an engine that cannot read the image."""

    name = "failing"

    def recognize(self, image) -> OCRResult:
        raise OCREngineError("Unable to process image", detail="cannot identify image file")


class BlockingOCREngine(OCREngine):
    """Holds the worker thread until released (or 5s pass)."""

    name = "blocking"

    def __init__(self, lines: List[str]):
        self.lines = lines
        self.started = threading.Event()
        self.release = threading.Event()

    def recognize(self, image) -> OCRResult:
        self.started.set()
        self.release.wait(timeout=5)
        return OCRResult(lines=list(self.lines), engine_used=self.name)


MARKED_PAGE = [
    "Chapter Two",
    "The walls were built long ago. /True voyage",
    "is return./ Nobody questioned it.",
    "Later she wrote /We have nothing but our freedom./",
]


@pytest.fixture
def marked_page_engine() -> StaticOCREngine:
    return StaticOCREngine(MARKED_PAGE)


@pytest.fixture
def blocking_engine():
    engine = BlockingOCREngine(MARKED_PAGE)
    yield engine
    engine.release.set()
