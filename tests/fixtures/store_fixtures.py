"""
Content store test fixtures.
"""

import hashlib
import json
from typing import Any, Dict, List, Optional, Set

from baes_sdk.store.base import ContentStore, StoredEntry, tags_match
from baes_sdk.utils.errors import StoreUploadError, StoreQueryError, StoreFetchError


OWNER = "0x1111111111111111111111111111111111111111"
OTHER_OWNER = "0x2222222222222222222222222222222222222222"
APPLICATION = "demo"


class InMemoryContentStore(ContentStore):
    """Dict-backed store with call counters and failure injection."""

    def __init__(self):
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.tags: Dict[str, Dict[str, str]] = {}
        self.failing_fetches: Set[str] = set()
        self.upload_error: Optional[Exception] = None
        self.query_error: Optional[Exception] = None
        self.upload_calls = 0
        self.query_calls = 0
        self.fetch_calls = 0
        self.closed = False

    async def upload(self, content: Dict[str, Any], tags: Dict[str, str]) -> str:
        self.upload_calls += 1
        if self.upload_error is not None:
            raise self.upload_error

        body = json.dumps(content, sort_keys=True)
        content_id = hashlib.sha256(body.encode()).hexdigest()
        self.objects[content_id] = json.loads(body)
        self.tags[content_id] = dict(tags)
        return content_id

    async def query(self, tag_filter: Dict[str, str]) -> List[StoredEntry]:
        self.query_calls += 1
        if self.query_error is not None:
            raise self.query_error

        return [
            StoredEntry(content_id=content_id, tags=dict(tags))
            for content_id, tags in self.tags.items()
            if tags_match(tags, tag_filter)
        ]

    async def fetch(self, content_id: str) -> Dict[str, Any]:
        self.fetch_calls += 1
        if content_id in self.failing_fetches or content_id not in self.objects:
            raise StoreFetchError(f"Object unavailable: {content_id}", status=404)
        return json.loads(json.dumps(self.objects[content_id]))

    async def close(self) -> None:
        self.closed = True

    def add_raw(self, content_id: str, content: Any, tags: Dict[str, str]) -> None:
        """Place an object directly, bypassing upload."""
        self.objects[content_id] = content
        self.tags[content_id] = dict(tags)

    def fail_upload(self, message: str = "quota exceeded", status: int = 403) -> None:
        self.upload_error = StoreUploadError(message, status=status)

    def fail_query(self, message: str = "service unavailable", status: int = 503) -> None:
        self.query_error = StoreQueryError(message, status=status)


class StepClock:
    """Millisecond clock that advances by a fixed step on every read."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1):
        self.current = start
        self.step = step
        self.readings: List[int] = []

    def __call__(self) -> int:
        value = self.current
        self.current += self.step
        self.readings.append(value)
        return value
