"""
BAES SDK - checkpoint saving and loading on content-addressed storage.

This package lets applications persist snapshots of their state with:
- Immutable, content-addressed checkpoints
- Latest-wins and exact-timestamp selection
- Tag-indexed listing per (owner, application)
- Pinata IPFS and local filesystem backends
"""

__version__ = "1.0.0"

from .checkpoint import Checkpoint, CheckpointManager
from .sdk import BaesSDK
from .store import ContentStore, LocalContentStore, PinataStore
from .utils.config import BaesConfig, load_config
from .utils.errors import (
    BaesError,
    ConfigurationError,
    ValidationError,
    UploadError,
    LoadError,
    QueryError,
)

__all__ = [
    'BaesSDK',
    'BaesConfig',
    'load_config',
    'Checkpoint',
    'CheckpointManager',
    'ContentStore',
    'LocalContentStore',
    'PinataStore',
    'BaesError',
    'ConfigurationError',
    'ValidationError',
    'UploadError',
    'LoadError',
    'QueryError',
]
