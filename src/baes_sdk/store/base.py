"""Content store interface consumed by the checkpoint manager"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StoredEntry:
    """A query hit: content identifier plus its tags, without the body"""
    content_id: str
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def created_at(self) -> Optional[int]:
        """createdAt tag as an integer, or None if missing or malformed"""
        raw = self.tags.get("createdAt")
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    @property
    def sort_key(self):
        return (self.created_at or 0, self.content_id)


class ContentStore(ABC):
    """Immutable, content-addressed object store with a tag index

    Implementations raise StoreUploadError, StoreQueryError and
    StoreFetchError from upload, query and fetch respectively. Each call is
    an independent request, so one instance may be shared by concurrent
    operations.
    """

    @abstractmethod
    async def upload(self, content: Dict[str, Any], tags: Dict[str, str]) -> str:
        """Store content with indexable tags and return its content id"""

    @abstractmethod
    async def query(self, tag_filter: Dict[str, str]) -> List[StoredEntry]:
        """Return every entry whose tags equal all items of tag_filter"""

    @abstractmethod
    async def fetch(self, content_id: str) -> Dict[str, Any]:
        """Retrieve and decode the body stored under content_id"""

    async def close(self) -> None:
        """Release transport resources"""

    async def __aenter__(self) -> 'ContentStore':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def tags_match(tags: Dict[str, str], tag_filter: Dict[str, str]) -> bool:
    """Equality filter over all keys of tag_filter"""
    return all(tags.get(key) == value for key, value in tag_filter.items())
