"""
Base adapter implementation with common functionality.
"""

from abc import ABC

from ..types import ChainConfig
from ..interfaces import IChainAdapter


class BaseAdapter(IChainAdapter, ABC):
    """Base adapter with common functionality"""

    def __init__(self, config: ChainConfig):
        self._config = config
        self._connected = False

    @property
    def config(self) -> ChainConfig:
        return self._config

    @property
    def chain_id(self) -> int:
        return self._config.chain_id

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _ensure_connected(self):
        if not self._connected:
            raise ConnectionError(f"Not connected to {self._config.name}")
