"""
Pytest configuration and shared fixtures for BAES SDK tests.
"""

import pytest
import structlog

from baes_sdk.checkpoint import CheckpointManager
from baes_sdk.store import LocalContentStore
from baes_sdk.utils.config import BaesConfig

from fixtures import InMemoryContentStore, StepClock, OWNER, APPLICATION


@pytest.fixture(autouse=True, scope="session")
def structured_logging():
    """Route structlog through stdlib logging, uncached, so capture_logs works."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"])
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def owner() -> str:
    """A valid owner address."""
    return OWNER


@pytest.fixture
def application() -> str:
    return APPLICATION


@pytest.fixture
def memory_store() -> InMemoryContentStore:
    """Create an in-memory content store."""
    return InMemoryContentStore()


@pytest.fixture
def clock() -> StepClock:
    """Deterministic millisecond clock, one tick per save."""
    return StepClock()


@pytest.fixture
def manager(memory_store: InMemoryContentStore, clock: StepClock) -> CheckpointManager:
    """Create a checkpoint manager over the in-memory store."""
    return CheckpointManager(memory_store, clock=clock)


@pytest.fixture
def local_store(tmp_path) -> LocalContentStore:
    """Create a filesystem store in a temporary directory."""
    return LocalContentStore(tmp_path / "store")


@pytest.fixture
def test_config() -> BaesConfig:
    """Configuration pointing at fake endpoints."""
    return BaesConfig(
        api_key="test-jwt",
        api_url="http://pinata.invalid",
        gateway_url="http://gateway.invalid/ipfs",
        request_timeout=5.0
    )
