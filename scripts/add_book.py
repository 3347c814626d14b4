"""
Add a book to the local library and print its id.

    python scripts/add_book.py "Ursula K. Le Guin" "The Dispossessed" 1974
"""

import argparse
import sys

from pagemark.errors import RecordValidationError
from pagemark.log_config import configure_logging
from pagemark.settings import get_settings
from pagemark.storage import Book, BookSortOption, build_repository


def main() -> int:
    parser = argparse.ArgumentParser(description="Add a book to the library")
    parser.add_argument("author")
    parser.add_argument("title")
    parser.add_argument("year")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    repo = build_repository(settings)

    try:
        book = Book.new(args.author, args.title, args.year)
    except RecordValidationError as e:
        print(f"❌ {e.message}")
        return 1

    repo.add_book(book)
    print(f"✅ Added {book.id}")

    for b in repo.get_sorted_books(BookSortOption.AUTHOR):
        print(f"   {b.id}  {b.author} - {b.title} ({b.year}), {repo.get_note_count(b.id)} notes")

    return 0


if __name__ == "__main__":
    sys.exit(main())
