"""
Content store backends for the BAES SDK.

This package provides:
- The ContentStore interface (upload, query, fetch)
- A Pinata IPFS backend
- A local filesystem backend for development and tests
"""

from .base import ContentStore, StoredEntry
from .local import LocalContentStore
from .pinata import PinataStore

__all__ = [
    'ContentStore',
    'StoredEntry',
    'LocalContentStore',
    'PinataStore',
]
