"""
Database models for Pagemark.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, LargeBinary, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(Base):
    """One opaque blob stored under a fixed key."""

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)
