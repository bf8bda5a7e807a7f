"""Filesystem content-addressed store with a tag index"""

import asyncio
import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os

from .base import ContentStore, StoredEntry, tags_match
from ..utils.logging import get_logger
from ..utils.errors import StoreUploadError, StoreQueryError, StoreFetchError

logger = get_logger("baes-sdk.store.local")


def canonical_json(content: Dict[str, Any]) -> bytes:
    """Serialize deterministically so equal content hashes equally"""
    return json.dumps(content, sort_keys=True, separators=(",", ":")).encode("utf-8")


class LocalContentStore(ContentStore):
    """Content-addressable storage on the local filesystem

    Objects are stored by their SHA-256 hash, sharded by the first two hex
    characters. Tags live in a single index file that is rewritten
    atomically on every upload.
    """

    def __init__(self, storage_path: Path):
        """Initialize the store

        Args:
            storage_path: Base path for objects and the tag index
        """
        self.storage_path = Path(storage_path)
        self.objects_path = self.storage_path / "objects"
        self.index_path = self.storage_path / "index.json"

        self._index: Optional[Dict[str, Dict[str, str]]] = None
        self._index_lock = asyncio.Lock()

    async def upload(self, content: Dict[str, Any], tags: Dict[str, str]) -> str:
        try:
            data = canonical_json(content)
        except (TypeError, ValueError) as e:
            raise StoreUploadError(f"Content is not JSON-serializable: {e}", cause=e) from e

        content_hash = hashlib.sha256(data).hexdigest()
        object_path = self._object_path(content_hash)

        try:
            async with self._index_lock:
                index = await self._load_index()

                if not await aiofiles.os.path.exists(object_path):
                    await aiofiles.os.makedirs(object_path.parent, exist_ok=True)
                    async with aiofiles.open(object_path, 'wb') as f:
                        await f.write(data)
                else:
                    logger.debug("local_store_dedup_hit", content_id=content_hash)

                updated = {**index, content_hash: {str(k): str(v) for k, v in tags.items()}}
                await self._save_index(updated)
                self._index = updated
        except OSError as e:
            raise StoreUploadError(f"Failed to write object {content_hash}: {e}", cause=e) from e

        logger.debug(
            "local_store_object_stored",
            content_id=content_hash,
            size=len(data)
        )
        return content_hash

    async def query(self, tag_filter: Dict[str, str]) -> List[StoredEntry]:
        try:
            async with self._index_lock:
                index = await self._load_index()
                return [
                    StoredEntry(content_id=content_id, tags=dict(tags))
                    for content_id, tags in index.items()
                    if tags_match(tags, tag_filter)
                ]
        except (OSError, ValueError) as e:
            raise StoreQueryError(f"Failed to read tag index: {e}", cause=e) from e

    async def fetch(self, content_id: str) -> Dict[str, Any]:
        object_path = self._object_path(content_id)

        try:
            async with aiofiles.open(object_path, 'rb') as f:
                data = await f.read()
        except FileNotFoundError as e:
            raise StoreFetchError(f"Object not found: {content_id}", status=404, cause=e) from e
        except OSError as e:
            raise StoreFetchError(f"Failed to read object {content_id}: {e}", cause=e) from e

        actual_hash = hashlib.sha256(data).hexdigest()
        if actual_hash != content_id:
            raise StoreFetchError(f"Hash mismatch: expected {content_id}, got {actual_hash}")

        try:
            return json.loads(data)
        except ValueError as e:
            raise StoreFetchError(f"Object {content_id} is not valid JSON: {e}", cause=e) from e

    def _object_path(self, content_id: str) -> Path:
        return self.objects_path / content_id[:2] / f"{content_id[2:]}.json"

    async def _load_index(self) -> Dict[str, Dict[str, str]]:
        """Load the index from disk once; callers hold the lock"""
        if self._index is not None:
            return self._index

        if not await aiofiles.os.path.exists(self.index_path):
            self._index = {}
            return self._index

        async with aiofiles.open(self.index_path, 'r') as f:
            self._index = json.loads(await f.read())

        logger.debug("local_store_index_loaded", path=str(self.index_path), objects=len(self._index))
        return self._index

    async def _save_index(self, index: Dict[str, Dict[str, str]]) -> None:
        """Save index to disk"""
        await aiofiles.os.makedirs(self.storage_path, exist_ok=True)
        temp_path = self.index_path.with_suffix('.tmp')

        async with aiofiles.open(temp_path, 'w') as f:
            await f.write(json.dumps(index, indent=2, sort_keys=True))

        # Atomic rename
        await aiofiles.os.rename(temp_path, self.index_path)
