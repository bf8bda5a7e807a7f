"""
Test fixtures for the BAES SDK.

Provides an in-memory content store, a controllable clock and a fake
Pinata HTTP service.
"""

from .store_fixtures import InMemoryContentStore, StepClock, OWNER, OTHER_OWNER, APPLICATION
from .pinata_fixtures import FakePinata, make_cid

__all__ = [
    "InMemoryContentStore",
    "StepClock",
    "FakePinata",
    "make_cid",
    "OWNER",
    "OTHER_OWNER",
    "APPLICATION",
]
