"""
Pagemark - Capture marked passages from photographed book pages

Pipeline:
1. OCR a photo of a page
2. Clean up common OCR artifacts
3. Keep only passages the reader marked with /slashes/
4. Save them as notes on a book in a local library
"""

__version__ = "1.0.0"

from pagemark.settings import Settings, get_settings
from pagemark.storage import Book, Note, LibraryRepository, BookSortOption, build_repository
from pagemark.capture import CaptureSession, CaptureResult, CaptureState, FailureReason

__all__ = [
    "Settings",
    "get_settings",
    "Book",
    "Note",
    "LibraryRepository",
    "BookSortOption",
    "build_repository",
    "CaptureSession",
    "CaptureResult",
    "CaptureState",
    "FailureReason",
]
