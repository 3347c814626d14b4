"""
Unit tests for the SQLAlchemy key-value store.
"""

import pytest

from pagemark.errors import PersistenceError
from pagemark.storage.kv_store import KeyValueStore


class TestKeyValueStore:

    def test_missing_key_is_none(self, kv_store):
        assert kv_store.get("SavedBooks") is None

    def test_set_and_overwrite(self, kv_store):
        kv_store.set("SavedBooks", b"[]")
        kv_store.set("SavedBooks", b'[{"x": 1}]')

        assert kv_store.get("SavedBooks") == b'[{"x": 1}]'
        assert kv_store.keys() == ["SavedBooks"]

    def test_set_many_writes_all_keys(self, kv_store):
        kv_store.set_many({"SavedBooks": b"[1]", "SavedNotes": b"[2]"})

        assert kv_store.get("SavedBooks") == b"[1]"
        assert kv_store.get("SavedNotes") == b"[2]"

    def test_set_many_is_all_or_nothing(self, kv_store):
        kv_store.set("SavedBooks", b"old")

        with pytest.raises(PersistenceError):
            kv_store.set_many({"SavedBooks": b"new", "SavedNotes": None})

        assert kv_store.get("SavedBooks") == b"old"
        assert kv_store.get("SavedNotes") is None

    def test_delete(self, kv_store):
        kv_store.set("SavedBooks.corrupt", b"junk")

        assert kv_store.delete("SavedBooks.corrupt") is True
        assert kv_store.delete("SavedBooks.corrupt") is False
        assert kv_store.get("SavedBooks.corrupt") is None

    def test_sqlite_file_survives_reopen(self, tmp_path):
        path = tmp_path / "library.db"
        first = KeyValueStore(sqlite_path=path)
        first.set("SavedNotes", b"[]")
        first.close()

        second = KeyValueStore(sqlite_path=path)
        assert second.get("SavedNotes") == b"[]"
        second.close()
