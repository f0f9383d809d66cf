"""
Registry of supported chains.

Holds the immutable descriptor and the connection pool of every chain. It is
built once at startup and handed to the components that need chain access.
"""

import asyncio
import logging
from types import MappingProxyType
from typing import Dict, Optional, List, Any, Tuple, Iterable, Callable, Awaitable, TypeVar

from .types import (
    ChainConfig, ChainInfo, ChainUnreachableError, UnknownChainError,
    FEE_APPROXIMATION_GAS
)
from .interfaces import IChainAdapter
from .connection_pool import ConnectionPool, AdapterBuilder
from .adapter_factory import AdapterFactory
from .config import GatewaySettings
from .utils import format_units, to_hex_quantity, validate_address

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChainRegistry:
    """
    Registry of chain descriptors and their live connections.
    Read-only after construction.
    """

    def __init__(self, configs: Iterable[ChainConfig], connection_pool: ConnectionPool):
        self.connection_pool = connection_pool

        chains: Dict[int, ChainConfig] = {}
        for config in configs:
            if config.chain_id in chains:
                raise ValueError(f"Chain {config.chain_id} registered twice")
            chains[config.chain_id] = config
            connection_pool.register_chain(config)
            logger.info(f"Registered chain {config.name} ({config.chain_id})")

        self._chains = MappingProxyType(chains)

    @classmethod
    def from_settings(cls, settings: GatewaySettings,
                      adapter_factory: AdapterBuilder = AdapterFactory.create_adapter) -> "ChainRegistry":
        pool = ConnectionPool(
            max_connections_per_chain=settings.max_connections_per_chain,
            connection_timeout=settings.connection_timeout,
            health_check_interval=settings.health_check_interval,
            max_idle_time=settings.max_idle_time,
            adapter_factory=adapter_factory
        )
        return cls(settings.chain_configs(), pool)

    async def initialize(self):
        await self.connection_pool.initialize()

    async def close(self):
        await self.connection_pool.close()

    @property
    def chains(self) -> List[ChainConfig]:
        return list(self._chains.values())

    def get_config(self, chain_id: int) -> ChainConfig:
        config = self._chains.get(chain_id)
        if config is None:
            raise UnknownChainError(chain_id)
        return config

    def is_supported(self, chain_id: int) -> bool:
        return chain_id in self._chains

    async def _call(self, chain_id: int, operation: str,
                    fn: Callable[[IChainAdapter], Awaitable[T]]) -> T:
        """Run one RPC operation on a leased adapter of the chain"""
        config = self.get_config(chain_id)
        try:
            async with self.connection_pool.get_connection(chain_id) as adapter:
                return await fn(adapter)
        except Exception as e:
            logger.warning(f"{operation} failed for chain {config.name}: {e}")
            raise ChainUnreachableError(
                f"chain request unreachable: {operation} failed for chain {config.name}: {e}",
                chain_id=chain_id,
                operation=operation
            ) from e

    async def balance_at(self, chain_id: int, address: str) -> int:
        return await self._call(chain_id, "balance_at",
                                lambda adapter: adapter.get_balance(address))

    async def suggest_gas_price(self, chain_id: int) -> int:
        return await self._call(chain_id, "suggest_gas_price",
                                lambda adapter: adapter.suggest_gas_price())

    async def suggest_gas_tip_cap(self, chain_id: int) -> int:
        return await self._call(chain_id, "suggest_gas_tip_cap",
                                lambda adapter: adapter.suggest_gas_tip_cap())

    async def transaction_by_hash(self, chain_id: int, tx_hash: str) -> Tuple[Dict[str, Any], bool]:
        return await self._call(chain_id, "transaction_by_hash",
                                lambda adapter: adapter.get_transaction(tx_hash))

    async def transaction_receipt(self, chain_id: int, tx_hash: str) -> Dict[str, Any]:
        return await self._call(chain_id, "transaction_receipt",
                                lambda adapter: adapter.get_transaction_receipt(tx_hash))

    async def get_gas_price_hex(self, chain_id: int) -> str:
        return to_hex_quantity(await self.suggest_gas_price(chain_id))

    def get_gas_limit_hex(self, chain_id: int) -> str:
        return to_hex_quantity(self.get_config(chain_id).set_delegation_gas_limit)

    def get_delegates_contract_address(self, chain_id: int) -> str:
        return self.get_config(chain_id).delegates_contract

    async def get_chains_info(self, address: str,
                              timeout: Optional[float] = None) -> Dict[str, ChainInfo]:
        """
        Balance and fee approximation of an address on every registered chain.

        Chains are queried concurrently. The result is all-or-nothing: when
        any chain fails, or the timeout expires, every outstanding query is
        cancelled and an error is raised instead of a partial map.

        Raises:
            ValueError: If the address is malformed
            ChainUnreachableError: If any chain query fails or times out
        """
        if not validate_address(address):
            raise ValueError(f"Invalid address: {address}")

        tasks = {
            config.name: asyncio.create_task(self._chain_info(config, address))
            for config in self._chains.values()
        }
        if not tasks:
            return {}

        try:
            done, pending = await asyncio.wait(
                tasks.values(), timeout=timeout, return_when=asyncio.FIRST_EXCEPTION
            )
        finally:
            outstanding = [task for task in tasks.values() if not task.done()]
            for task in outstanding:
                task.cancel()
            if outstanding:
                await asyncio.gather(*outstanding, return_exceptions=True)

        errors = [task.exception() for task in tasks.values()
                  if task in done and task.exception() is not None]
        if errors:
            raise errors[0]
        if pending:
            raise ChainUnreachableError(
                f"chain request unreachable: chains info timed out after {timeout}s",
                operation="get_chains_info"
            )

        return {name: task.result() for name, task in tasks.items()}

    async def _chain_info(self, config: ChainConfig, address: str) -> ChainInfo:
        balance = await self.balance_at(config.chain_id, address)
        gas_price = await self.suggest_gas_price(config.chain_id)

        return ChainInfo(
            id=config.chain_id,
            name=config.public_name,
            balance=format_units(balance, config.decimals),
            symbol=config.symbol,
            fee_approximation=format_units(gas_price, config.decimals) * FEE_APPROXIMATION_GAS,
            tx_scan_template=config.tx_scan_template
        )
