"""
Key-Value Store for Pagemark

Local persistence surface for whole-collection blobs using SQLAlchemy:
- SQLite file for normal use
- In-memory SQLite for tests
- Multi-key writes in a single transaction
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from pagemark.errors import PersistenceError
from pagemark.storage.models import Base, KeyValueEntry


class KeyValueStore:
    """
    Blob storage keyed by string.

    Usage:
        store = KeyValueStore(sqlite_path=Path("library.db"))
        store.set_many({"SavedBooks": b"[]", "SavedNotes": b"[]"})
        store.get("SavedBooks")
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
    ):
        """
        Initialize store.

        Args:
            database_url: SQLAlchemy database URL
            sqlite_path: Path for SQLite database
            echo: Log emitted SQL
        """
        if database_url:
            self.database_url = database_url
        elif sqlite_path:
            self.database_url = f"sqlite:///{sqlite_path}"
        else:
            # Default to in-memory SQLite
            self.database_url = "sqlite:///:memory:"

        self.engine = create_engine(self.database_url, echo=echo)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)

        logger.info(f"KeyValueStore initialized: {self.database_url[:50]}")

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def get(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under a key.

        Returns:
            Blob bytes or None when the key was never written
        """
        with self.get_session() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: bytes) -> None:
        """Write a single key."""
        self.set_many({key: value})

    def set_many(self, items: dict[str, bytes]) -> None:
        """
        Write several keys atomically.

        Either every key is written or none is.

        Raises:
            PersistenceError: If the transaction fails
        """
        try:
            with self.get_session() as session, session.begin():
                for key, value in items.items():
                    session.merge(KeyValueEntry(key=key, value=value))
        except SQLAlchemyError as e:
            logger.error(f"Failed to write keys {sorted(items)}: {e}")
            raise PersistenceError("Failed to save library", detail=str(e)) from e

        logger.debug(f"Wrote keys: {', '.join(items)}")

    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        try:
            with self.get_session() as session, session.begin():
                entry = session.get(KeyValueEntry, key)
                if entry is None:
                    return False
                session.delete(entry)
                return True
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete key '{key}'", detail=str(e)) from e

    def keys(self) -> list[str]:
        """List stored keys."""
        with self.get_session() as session:
            return [k for (k,) in session.query(KeyValueEntry.key).order_by(KeyValueEntry.key)]

    def close(self) -> None:
        """Release database connections."""
        self.engine.dispose()
