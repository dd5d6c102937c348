"""Tests for the JSON file record store."""

import json

import pytest

from pairgate.errors import StoreUnavailable
from pairgate.store import JsonFileStore, check_store_connection


class TestJsonFileStore:
    async def test_load_missing_collection_returns_default_copy(self, store):
        default = {"count": 0}

        value = await store.load("visits", default=default)
        value["count"] = 5

        assert default == {"count": 0}
        assert await store.load("missing") is None

    async def test_save_then_load(self, store, data_dir):
        await store.save("posts", [{"id": "1", "title": "Hi"}])

        assert await store.load("posts", default=[]) == [{"id": "1", "title": "Hi"}]
        text = (data_dir / "posts.json").read_text()
        assert text.startswith("[\n  {")

    async def test_save_creates_data_dir(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "data")

        await store.save("pairs", [])

        assert json.loads((tmp_path / "nested" / "data" / "pairs.json").read_text()) == []

    async def test_save_leaves_no_temp_files(self, store, data_dir):
        await store.save("pairs", [1, 2, 3])
        await store.save("pairs", [4])

        assert sorted(p.name for p in data_dir.iterdir()) == ["pairs.json"]

    async def test_invalid_json_raises_store_unavailable(self, store, data_dir):
        (data_dir / "pairs.json").write_text("[1, 2")

        with pytest.raises(StoreUnavailable):
            await store.load("pairs", default=[])

    async def test_unserializable_value_raises_store_unavailable(self, store):
        with pytest.raises(StoreUnavailable):
            await store.save("pairs", [object()])

    async def test_seed_only_writes_missing_collections(self, store):
        assert await store.seed("visits", {"count": 0}) is True
        await store.save("visits", {"count": 7})

        assert await store.seed("visits", {"count": 0}) is False
        assert await store.load("visits") == {"count": 7}

    async def test_transaction_lock_is_per_collection(self, store):
        async with store.transaction("pairs"):
            # A different collection is not blocked
            async with store.transaction("posts"):
                await store.save("posts", [])

        assert await store.exists("posts")


class TestCheckStoreConnection:
    async def test_connected_when_data_dir_exists(self, store):
        assert await check_store_connection() is True

    async def test_disconnected_when_data_dir_missing(self, monkeypatch, tmp_path):
        from pairgate.config import settings
        from pairgate.store import reset_store

        monkeypatch.setattr(settings, "data_dir", str(tmp_path / "absent"))
        reset_store()

        assert await check_store_connection() is False
