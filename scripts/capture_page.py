"""
Capture Page Script

OCRs one photographed page and prints the /marked/ passages.
With --save the passages are stored as a note on the given book.

    python scripts/capture_page.py --book-id <uuid> page.jpg --page 42 --save
"""

import argparse
import asyncio
import sys
import uuid

from loguru import logger

from pagemark.capture import CaptureSession, TesseractOCREngine
from pagemark.log_config import configure_logging
from pagemark.settings import get_settings
from pagemark.storage import build_repository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Capture marked passages from a page photo")
    parser.add_argument("image", help="Path to the page photo")
    parser.add_argument("--book-id", required=True, type=uuid.UUID, help="Book to attach the note to")
    parser.add_argument("--page", default=None, help="Page number")
    parser.add_argument("--title", default="", help="Note title (default: date stamp)")
    parser.add_argument("--save", action="store_true", help="Store the note in the library")
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)

    repo = build_repository(settings)
    if repo.last_load_report.data_lost:
        logger.warning(f"Corrupt library data reset: {repo.last_load_report.corrupt_keys}")

    book = repo.get_book(args.book_id)
    if book is None:
        print(f"❌ No book with id {args.book_id}")
        return 1

    engine = TesseractOCREngine(
        languages=settings.ocr_languages,
        confidence_threshold=settings.ocr_confidence_threshold,
    )
    session = CaptureSession(engine, timeout=settings.ocr_timeout_seconds)

    result = await session.capture(args.image)
    if not result.succeeded:
        print(f"❌ {result.message}")
        if result.detail:
            print(f"   {result.detail}")
        return 2

    print(f"✅ {len(result.segments)} marked passage(s) from '{book.title}':\n")
    print(result.candidate_text)

    if args.save:
        note = session.confirm(book.id, result.candidate_text, page_number=args.page, title=args.title)
        repo.add_note(note)
        print(f"\nSaved note {note.id} ({note.title})")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
