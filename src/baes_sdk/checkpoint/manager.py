"""Checkpoint manager implementation"""

import asyncio
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import Checkpoint, LoadSelector, checkpoint_tags
from ..store.base import ContentStore, StoredEntry
from ..utils.logging import get_logger
from ..utils.errors import (
    ValidationError,
    UploadError,
    LoadError,
    QueryError,
)
from ..utils.validators import (
    validate_identity,
    payload_validator,
    positive_integer_validator,
)

logger = get_logger("baes-sdk.checkpoint")

SCHEMA_VERSION = "1.0.0"


def wall_clock_ms() -> int:
    """Milliseconds since epoch"""
    return int(time.time() * 1000)


class MonotonicClock:
    """Wall-clock milliseconds that never repeat or go backwards

    Two saves within the same millisecond get consecutive timestamps, so
    (owner, application, created_at) stays unique for one manager.
    """

    def __init__(self, source: Callable[[], int] = wall_clock_ms):
        self._source = source
        self._last = 0

    def now(self) -> int:
        current = max(self._source(), self._last + 1)
        self._last = current
        return current


class CheckpointManager:
    """Saves, selects and lists checkpoints in a content store

    Every operation validates its inputs before touching the store and
    wraps store failures in an error with a stable code:

    - save: UploadError
    - load: LoadError
    - list_checkpoints: QueryError

    Absence is never an error: load returns None and list_checkpoints
    returns an empty list.
    """

    def __init__(
        self,
        store: ContentStore,
        schema_version: str = SCHEMA_VERSION,
        fetch_concurrency: int = 8,
        clock: Optional[Callable[[], int]] = None
    ):
        """Initialize checkpoint manager

        Args:
            store: Content store used for every operation
            schema_version: Data-shape version written into new checkpoints
            fetch_concurrency: Maximum parallel fetches while listing
            clock: Millisecond time source (defaults to the wall clock)
        """
        self.store = store
        self.schema_version = schema_version
        self.fetch_concurrency = max(1, fetch_concurrency)
        self._clock = MonotonicClock(clock or wall_clock_ms)

    async def save(self, owner: str, application: str, payload: Mapping[str, Any]) -> None:
        """Save a new checkpoint

        Args:
            owner: Account address (0x + 40 hex characters)
            application: Calling application or game identifier
            payload: JSON-serializable state snapshot
        """
        validate_identity(owner, application)
        payload_validator().validate(payload)

        checkpoint = Checkpoint(
            owner=owner,
            application=application,
            created_at=self._clock.now(),
            payload=dict(payload),
            schema_version=self.schema_version
        )

        logger.debug(
            "checkpoint_save_started",
            owner=owner,
            application=application,
            created_at=checkpoint.created_at
        )

        try:
            content_id = await self.store.upload(checkpoint.to_record(), checkpoint.tags())
        except Exception as e:
            logger.error(
                "checkpoint_save_failed",
                owner=owner,
                application=application,
                error=str(e)
            )
            raise UploadError(f"Failed to save checkpoint: {e}", cause=e) from e

        logger.info(
            "checkpoint_saved",
            owner=owner,
            application=application,
            created_at=checkpoint.created_at,
            content_id=content_id
        )

    async def load(
        self,
        owner: str,
        application: str,
        timestamp: Optional[int] = None,
        checkpoint: Optional[Checkpoint] = None
    ) -> Optional[Dict[str, Any]]:
        """Load a checkpoint payload

        - Neither timestamp nor checkpoint: the latest checkpoint
        - timestamp: the checkpoint created at exactly that time
        - checkpoint: the checkpoint with the same created_at; this wins
          when a timestamp is also given

        Returns:
            The payload, or None if nothing matches
        """
        validate_identity(owner, application)
        positive_integer_validator("timestamp").validate(timestamp)
        if checkpoint is not None and not isinstance(checkpoint, Checkpoint):
            raise ValidationError(
                field="checkpoint",
                value=checkpoint,
                constraint="checkpoint must be a valid checkpoint object"
            )

        selector = LoadSelector(timestamp=timestamp, checkpoint=checkpoint)

        logger.debug(
            "checkpoint_load_started",
            owner=owner,
            application=application,
            target=selector.target_timestamp
        )

        try:
            entries = await self.store.query(checkpoint_tags(owner, application))

            selected = self._select(entries, selector)
            if selected is None:
                logger.debug(
                    "checkpoint_not_found",
                    owner=owner,
                    application=application,
                    candidates=len(entries),
                    target=selector.target_timestamp
                )
                return None

            record = await self.store.fetch(selected.content_id)
            loaded = Checkpoint.from_record(record, content_id=selected.content_id)
        except Exception as e:
            logger.error(
                "checkpoint_load_failed",
                owner=owner,
                application=application,
                error=str(e)
            )
            raise LoadError(f"Failed to load checkpoint: {e}", cause=e) from e

        logger.debug(
            "checkpoint_loaded",
            owner=owner,
            application=application,
            created_at=loaded.created_at,
            content_id=selected.content_id
        )
        return loaded.payload

    async def list_checkpoints(self, owner: str, application: str) -> List[Checkpoint]:
        """List all checkpoints for an owner and application, newest first

        Objects that fail to fetch or decode are skipped with a warning.
        """
        validate_identity(owner, application)

        try:
            entries = await self.store.query(checkpoint_tags(owner, application))
        except Exception as e:
            logger.error(
                "checkpoint_list_failed",
                owner=owner,
                application=application,
                error=str(e)
            )
            raise QueryError(f"Failed to list checkpoints: {e}", cause=e) from e

        semaphore = asyncio.Semaphore(self.fetch_concurrency)

        async def resolve(entry: StoredEntry) -> Optional[Checkpoint]:
            async with semaphore:
                return await self._fetch_checkpoint(entry)

        results = await asyncio.gather(*(resolve(entry) for entry in entries))
        checkpoints = [cp for cp in results if cp is not None]

        checkpoints.sort(key=lambda cp: cp.sort_key, reverse=True)

        logger.debug(
            "checkpoints_listed",
            owner=owner,
            application=application,
            count=len(checkpoints),
            skipped=len(entries) - len(checkpoints)
        )
        return checkpoints

    async def _fetch_checkpoint(self, entry: StoredEntry) -> Optional[Checkpoint]:
        """Fetch one entry; failures become None so listing can continue"""
        try:
            record = await self.store.fetch(entry.content_id)
            return Checkpoint.from_record(record, content_id=entry.content_id)
        except Exception as e:
            logger.warning(
                "checkpoint_fetch_skipped",
                content_id=entry.content_id,
                error=str(e)
            )
            return None

    def _select(self, entries: List[StoredEntry], selector: LoadSelector) -> Optional[StoredEntry]:
        """Pick the entry the selector refers to, using createdAt tags"""
        candidates = []
        for entry in entries:
            if entry.created_at is None:
                logger.warning("checkpoint_entry_untimestamped", content_id=entry.content_id)
                continue
            candidates.append(entry)

        if not selector.is_latest:
            target = selector.target_timestamp
            candidates = [entry for entry in candidates if entry.created_at == target]

        if not candidates:
            return None

        return max(candidates, key=lambda entry: entry.sort_key)
