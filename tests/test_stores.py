"""
Tests for the two storage backends on their own.

These tests verify:
  - Primary store: missing key reads as None, set/get round-trips, last write wins
  - Fallback store: same contract, atomic writes, keys can't escape the directory
"""

import pytest

from bank_sim.storage.fallback import FileKeyValueStore


class TestSqlKeyValueStore:
    """Tests for the SQLAlchemy-backed primary store."""

    async def test_missing_key(self, primary_store):
        assert await primary_store.get("khan-bank-data") is None

    async def test_set_then_get(self, primary_store):
        assert await primary_store.set("khan-bank-data", '{"balance": 1}') is True

        stored = await primary_store.get("khan-bank-data")
        assert stored.value == '{"balance": 1}'

    async def test_last_write_wins(self, primary_store):
        await primary_store.set("khan-bank-data", "first")
        await primary_store.set("khan-bank-data", "second")

        assert (await primary_store.get("khan-bank-data")).value == "second"

    async def test_keys_are_independent(self, primary_store):
        await primary_store.set("a", "1")
        await primary_store.set("b", "2")

        assert (await primary_store.get("a")).value == "1"
        assert (await primary_store.get("b")).value == "2"

    async def test_create_schema_is_idempotent(self, primary_store):
        await primary_store.set("khan-bank-data", "kept")
        await primary_store.create_schema()

        assert (await primary_store.get("khan-bank-data")).value == "kept"


class TestFileKeyValueStore:
    """Tests for the file-backed fallback store."""

    def test_missing_key(self, fallback_store):
        assert fallback_store.get_item("khan-bank-data") is None

    def test_set_then_get(self, fallback_store):
        fallback_store.set_item("khan-bank-data", '{"balance": 1}')

        assert fallback_store.get_item("khan-bank-data") == '{"balance": 1}'

    def test_creates_directory(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "nested" / "storage")
        store.set_item("khan-bank-data", "x")

        assert (tmp_path / "nested" / "storage" / "khan-bank-data.json").read_text() == "x"

    def test_last_write_wins_without_leftovers(self, fallback_store):
        fallback_store.set_item("khan-bank-data", "first")
        fallback_store.set_item("khan-bank-data", "second")

        assert fallback_store.get_item("khan-bank-data") == "second"
        assert sorted(p.name for p in fallback_store.directory.iterdir()) == [
            "khan-bank-data.json"
        ]

    def test_unicode_round_trip(self, fallback_store):
        fallback_store.set_item("khan-bank-data", '{"description": "Хоол ₮"}')

        assert fallback_store.get_item("khan-bank-data") == '{"description": "Хоол ₮"}'

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
    def test_rejects_unsafe_keys(self, fallback_store, key):
        with pytest.raises(ValueError):
            fallback_store.set_item(key, "x")
