"""JSON file record store.

Each named collection lives in ``<data_dir>/<collection>.json`` and is read
and written as a whole. Read-modify-write sequences must run inside
``transaction(collection)``, which serialises them per collection within
the process. Multiple processes sharing one data directory are still
last-write-wins.

Uses lazy initialization so tests can point ``settings.data_dir`` at a
temporary directory and call ``reset_store()``.
"""

import asyncio
import copy
import json
import os
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from pairgate.config import settings
from pairgate.errors import StoreUnavailable
from pairgate.logging_config import get_logger

logger = get_logger(__name__)

PAIRS = "pairs"
POSTS = "posts"
VISITS = "visits"


class JsonFileStore:
    """Whole-collection load/save over one JSON file per collection."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self._locks: dict[str, asyncio.Lock] = {}

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _get_lock(self, collection: str) -> asyncio.Lock:
        if collection not in self._locks:
            self._locks[collection] = asyncio.Lock()
        return self._locks[collection]

    @asynccontextmanager
    async def transaction(self, collection: str) -> AsyncGenerator[None, None]:
        """Hold exclusive access to a collection for a read-modify-write."""
        async with self._get_lock(collection):
            yield

    async def exists(self, collection: str) -> bool:
        return await asyncio.to_thread(self.path_for(collection).is_file)

    async def load(self, collection: str, default: Any = None) -> Any:
        """Load a whole collection.

        Returns a copy of ``default`` when the collection has never been
        written.

        Raises:
            StoreUnavailable: If the file cannot be read or is not valid JSON.
        """
        try:
            return await asyncio.to_thread(self._read, collection)
        except FileNotFoundError:
            return copy.deepcopy(default)
        except (OSError, ValueError) as exc:
            logger.error(
                "Failed to load collection",
                collection=collection,
                error=str(exc),
            )
            raise StoreUnavailable(f"Cannot load collection {collection!r}") from exc

    async def save(self, collection: str, value: Any) -> None:
        """Replace a whole collection atomically.

        Raises:
            StoreUnavailable: If the file cannot be written.
        """
        try:
            await asyncio.to_thread(self._write, collection, value)
        except (OSError, TypeError, ValueError) as exc:
            logger.error(
                "Failed to save collection",
                collection=collection,
                error=str(exc),
            )
            raise StoreUnavailable(f"Cannot save collection {collection!r}") from exc

    async def seed(self, collection: str, value: Any) -> bool:
        """Write ``value`` only if the collection does not exist yet."""
        async with self.transaction(collection):
            if await self.exists(collection):
                return False
            await self.save(collection, value)
        logger.info("Seeded collection", collection=collection)
        return True

    async def ping(self) -> bool:
        """Check that the data directory exists and is writable."""
        return await asyncio.to_thread(
            lambda: self.data_dir.is_dir() and os.access(self.data_dir, os.W_OK)
        )

    def _read(self, collection: str) -> Any:
        with self.path_for(collection).open(encoding="utf-8") as fh:
            return json.load(fh)

    def _write(self, collection: str, value: Any) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(value, indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path_for(collection))
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise


# Store instance - lazily initialized
_store: Optional[JsonFileStore] = None


def get_store() -> JsonFileStore:
    """Get or create the process-wide record store.

    Also usable as a FastAPI dependency.
    """
    global _store
    if _store is None:
        _store = JsonFileStore(settings.data_dir)
    return _store


def reset_store() -> None:
    """Drop the cached store so the next call picks up new settings."""
    global _store
    _store = None


async def check_store_connection() -> bool:
    """Return True if the record store's data directory is usable."""
    try:
        return await get_store().ping()
    except OSError:
        return False
