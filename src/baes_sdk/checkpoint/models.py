"""Checkpoint data model and its stored (wire) representation"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

CHECKPOINT_KIND = "checkpoint"


@dataclass
class Checkpoint:
    """An immutable, timestamped snapshot of application state"""
    owner: str
    application: str
    created_at: int  # milliseconds since epoch
    payload: Dict[str, Any]
    schema_version: str
    content_id: Optional[str] = None  # set when read back from a store

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the stored object body"""
        return {
            "owner": self.owner,
            "application": self.application,
            "createdAt": self.created_at,
            "payload": self.payload,
            "schemaVersion": self.schema_version
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any], content_id: Optional[str] = None) -> 'Checkpoint':
        """Create from a stored object body

        Raises:
            ValueError: If the body is not a checkpoint record
        """
        if not isinstance(data, dict):
            raise ValueError("checkpoint record must be an object")

        try:
            created_at = data["createdAt"]
            payload = data["payload"]
        except KeyError as e:
            raise ValueError(f"checkpoint record is missing {e}") from e

        if isinstance(created_at, bool) or not isinstance(created_at, int):
            raise ValueError("createdAt must be an integer")
        if not isinstance(payload, dict):
            raise ValueError("payload must be an object")

        return cls(
            owner=data.get("owner", ""),
            application=data.get("application", ""),
            created_at=created_at,
            payload=payload,
            schema_version=str(data.get("schemaVersion", "")),
            content_id=content_id
        )

    def tags(self) -> Dict[str, str]:
        """Tag set attached at upload, used only for querying"""
        return checkpoint_tags(self.owner, self.application, self.created_at)

    @property
    def sort_key(self):
        return (self.created_at, self.content_id or "")


def checkpoint_tags(owner: str, application: str, created_at: Optional[int] = None) -> Dict[str, str]:
    """Build a tag set; without created_at it doubles as the query filter"""
    tags = {
        "owner": owner,
        "application": application,
        "kind": CHECKPOINT_KIND
    }
    if created_at is not None:
        tags["createdAt"] = str(created_at)
    return tags


@dataclass
class LoadSelector:
    """Which checkpoint `load` should return

    No criterion selects the latest. An explicit checkpoint reference takes
    precedence over a timestamp when both are given.
    """
    timestamp: Optional[int] = None
    checkpoint: Optional[Checkpoint] = None

    @property
    def target_timestamp(self) -> Optional[int]:
        if self.checkpoint is not None:
            return self.checkpoint.created_at
        return self.timestamp

    @property
    def is_latest(self) -> bool:
        return self.target_timestamp is None
