"""Checkpoint persistence for the BAES SDK

This module provides:
- Checkpoint model and its stored representation
- Tag-based identity (owner, application, createdAt)
- Save / load / list with latest-wins selection
"""

from .models import Checkpoint, LoadSelector, checkpoint_tags, CHECKPOINT_KIND
from .manager import CheckpointManager, MonotonicClock, SCHEMA_VERSION

__all__ = [
    "Checkpoint",
    "LoadSelector",
    "checkpoint_tags",
    "CHECKPOINT_KIND",
    "CheckpointManager",
    "MonotonicClock",
    "SCHEMA_VERSION"
]
