"""
Chain adapter factory for creating family-specific adapters.
"""

import logging
from typing import Dict, Type

from .interfaces import IChainAdapter
from .types import ChainFamily, ChainConfig
from .adapters import EVMAdapter

logger = logging.getLogger(__name__)


class AdapterFactory:
    """Factory for creating chain adapters"""

    # Mapping of chain families to adapter classes
    _adapters: Dict[ChainFamily, Type[IChainAdapter]] = {
        ChainFamily.EVM: EVMAdapter,
    }

    @classmethod
    def create_adapter(cls, config: ChainConfig) -> IChainAdapter:
        """
        Create an adapter instance for the specified chain configuration.

        Args:
            config: Chain descriptor containing RPC URL and chain family

        Returns:
            Unconnected adapter instance

        Raises:
            ValueError: If chain family is not supported
        """
        if config.family not in cls._adapters:
            raise ValueError(f"Unsupported chain family: {config.family}")

        return cls._adapters[config.family](config)

    @classmethod
    def register_adapter(cls, family: ChainFamily,
                         adapter_class: Type[IChainAdapter]):
        """
        Register a custom adapter implementation for a chain family.

        Args:
            family: The chain family
            adapter_class: The adapter class to use
        """
        cls._adapters[family] = adapter_class
        logger.info(f"Registered adapter {adapter_class.__name__} for {family.value}")

    @classmethod
    def is_family_supported(cls, family: ChainFamily) -> bool:
        """Check if a chain family is supported"""
        return family in cls._adapters
