"""
BAES SDK entry point.

Wires a content store and a checkpoint manager together from a
configuration object.
"""

from typing import Any, Dict, List, Mapping, Optional

from .checkpoint import Checkpoint, CheckpointManager
from .store import ContentStore, PinataStore
from .utils.config import BaesConfig, load_config
from .utils.errors import ConfigurationError
from .utils.logging import get_logger

logger = get_logger("baes-sdk")


class BaesSDK:
    """Checkpoint saving and loading for games and applications

    Example:
        async with BaesSDK(BaesConfig(api_key=token)) as sdk:
            await sdk.save_checkpoint(address, "my-game", {"level": 5})
            state = await sdk.load_checkpoint(address, "my-game")
    """

    def __init__(self, config: Optional[BaesConfig] = None, store: Optional[ContentStore] = None):
        """Initialize the SDK

        Args:
            config: SDK configuration; api_key is required unless a store is given
            store: Explicit content store, e.g. a LocalContentStore
        """
        self.config = config or BaesConfig()

        if store is None:
            if not self.config.api_key:
                raise ConfigurationError(
                    "Pinata API key is required. Please provide api_key in the SDK configuration."
                )
            store = PinataStore(self.config)

        self.store = store
        self.checkpoints = CheckpointManager(
            store,
            schema_version=self.config.schema_version,
            fetch_concurrency=self.config.fetch_concurrency
        )

        logger.debug(
            "sdk_initialized",
            store=type(store).__name__,
            schema_version=self.config.schema_version
        )

    @classmethod
    def from_env(cls, config_path: Optional[str] = None, **overrides: Any) -> 'BaesSDK':
        """Build the SDK from environment variables and an optional config file"""
        return cls(load_config(config_path, **overrides))

    async def save_checkpoint(self, owner: str, application: str, payload: Mapping[str, Any]) -> None:
        """Save checkpoint data"""
        await self.checkpoints.save(owner, application, payload)

    async def load_checkpoint(
        self,
        owner: str,
        application: str,
        timestamp: Optional[int] = None,
        checkpoint: Optional[Checkpoint] = None
    ) -> Optional[Dict[str, Any]]:
        """Load checkpoint data

        - If no timestamp or checkpoint provided: loads the latest checkpoint
        - If timestamp provided: loads that specific checkpoint
        - If checkpoint object provided: loads that checkpoint
        """
        return await self.checkpoints.load(owner, application, timestamp=timestamp, checkpoint=checkpoint)

    async def list_checkpoints(self, owner: str, application: str) -> List[Checkpoint]:
        """List all checkpoints for a specific owner and application"""
        return await self.checkpoints.list_checkpoints(owner, application)

    async def close(self) -> None:
        await self.store.close()

    async def __aenter__(self) -> 'BaesSDK':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
