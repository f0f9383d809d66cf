"""
Connection pool management for chain adapters.
Each chain gets its own bounded set of adapters; a leased adapter is used
by one request at a time, so transports that are not safe for concurrent
use are still serialized per chain without a global lock.
"""

import asyncio
import logging
from typing import Dict, Optional, Any, List, Callable, AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from .types import ChainConfig
from .interfaces import IChainAdapter
from .adapter_factory import AdapterFactory

logger = logging.getLogger(__name__)

AdapterBuilder = Callable[[ChainConfig], IChainAdapter]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConnectionInfo:
    """Information about a pooled connection"""
    adapter: IChainAdapter
    chain_id: int
    created_at: datetime
    last_used: datetime
    use_count: int = 0
    is_healthy: bool = True


class ConnectionPool:
    """
    Manages a pool of chain connections for efficient reuse.
    Features:
    - Connection reuse, at most max_connections_per_chain per chain
    - Exclusive leases, requests beyond the limit wait for a free adapter
    - Health checking with automatic reconnection
    """

    def __init__(self,
                 max_connections_per_chain: int = 5,
                 connection_timeout: float = 30,
                 health_check_interval: Optional[float] = 60,
                 max_idle_time: float = 300,
                 adapter_factory: AdapterBuilder = AdapterFactory.create_adapter):
        if max_connections_per_chain < 1:
            raise ValueError("max_connections_per_chain must be at least 1")
        self.max_connections_per_chain = max_connections_per_chain
        self.connection_timeout = connection_timeout
        self.health_check_interval = health_check_interval
        self.max_idle_time = max_idle_time
        self._adapter_factory = adapter_factory

        self._configs: Dict[int, ChainConfig] = {}
        self._pools: Dict[int, List[ConnectionInfo]] = {}
        self._idle: Dict[int, List[ConnectionInfo]] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._slots: Dict[int, asyncio.Semaphore] = {}
        self._health_check_task: Optional[asyncio.Task] = None
        self._closed = False

    async def initialize(self):
        """Initialize the connection pool"""
        if not self._closed and self.health_check_interval:
            self._health_check_task = asyncio.create_task(self._health_check_loop())
        logger.info("Connection pool initialized")

    async def close(self):
        """Close all connections and cleanup"""
        self._closed = True

        if self._health_check_task:
            self._health_check_task.cancel()
            try:
                await self._health_check_task
            except asyncio.CancelledError:
                pass

        for chain_id, connections in self._pools.items():
            for conn_info in connections:
                try:
                    await conn_info.adapter.disconnect()
                except Exception as e:
                    logger.error(f"Error closing connection for chain {chain_id}: {e}")

        self._pools = {chain_id: [] for chain_id in self._pools}
        self._idle = {chain_id: [] for chain_id in self._idle}
        logger.info("Connection pool closed")

    def register_chain(self, config: ChainConfig):
        """Register a chain configuration"""
        self._configs[config.chain_id] = config
        self._pools[config.chain_id] = []
        self._idle[config.chain_id] = []
        self._locks[config.chain_id] = asyncio.Lock()
        self._slots[config.chain_id] = asyncio.Semaphore(self.max_connections_per_chain)
        logger.info(f"Registered chain {config.name} ({config.chain_id}) with pool")

    @asynccontextmanager
    async def get_connection(self, chain_id: int) -> AsyncIterator[IChainAdapter]:
        """
        Lease a connection from the pool.
        Usage:
            async with pool.get_connection(1) as adapter:
                await adapter.get_balance(address)
        """
        if chain_id not in self._configs:
            raise ValueError(f"Chain {chain_id} not registered")
        if self._closed:
            raise RuntimeError("Connection pool is closed")

        async with self._slots[chain_id]:
            conn_info = await self._acquire_connection(chain_id)
            try:
                yield conn_info.adapter
            finally:
                await self._release_connection(chain_id, conn_info)

    async def _acquire_connection(self, chain_id: int) -> ConnectionInfo:
        """Take an idle healthy connection or create a new one"""
        async with self._locks[chain_id]:
            idle = self._idle[chain_id]
            while idle:
                conn_info = idle.pop()
                if conn_info.is_healthy:
                    conn_info.last_used = _now()
                    conn_info.use_count += 1
                    return conn_info

        # The slot semaphore guarantees there is room for one more
        conn_info = await self._create_connection(chain_id)

        async with self._locks[chain_id]:
            self._pools[chain_id].append(conn_info)
        return conn_info

    async def _release_connection(self, chain_id: int, conn_info: ConnectionInfo):
        """Return a connection to the idle set"""
        if self._closed:
            return
        if conn_info.is_healthy:
            async with self._locks[chain_id]:
                if conn_info in self._pools[chain_id]:
                    self._idle[chain_id].append(conn_info)
        else:
            await self._remove_connection(chain_id, conn_info)

    async def _create_connection(self, chain_id: int) -> ConnectionInfo:
        """Create a new connection"""
        config = self._configs[chain_id]
        adapter = self._adapter_factory(config)

        try:
            connected = await asyncio.wait_for(
                adapter.connect(),
                timeout=self.connection_timeout
            )
        except asyncio.TimeoutError:
            await self._discard_adapter(chain_id, adapter)
            raise ConnectionError(f"Connection timeout for {config.name}")

        if not connected:
            await self._discard_adapter(chain_id, adapter)
            raise ConnectionError(f"Cannot connect to {config.name} at {config.rpc_url}")

        now = _now()
        conn_info = ConnectionInfo(
            adapter=adapter,
            chain_id=chain_id,
            created_at=now,
            last_used=now,
            use_count=1
        )

        logger.info(f"Created new connection for {config.name}")
        return conn_info

    async def _health_check_loop(self):
        """Periodic health check for all connections"""
        while not self._closed:
            try:
                await asyncio.sleep(self.health_check_interval)
                await self.check_connections()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in health check loop: {e}")

    async def check_connections(self):
        """Probe idle connections, reconnect broken ones and drop stale ones"""
        for chain_id in list(self._idle):
            async with self._locks[chain_id]:
                candidates = list(self._idle[chain_id])

            for conn_info in candidates:
                # probes hold a lease slot, leases plus probes stay within the limit
                async with self._slots[chain_id]:
                    async with self._locks[chain_id]:
                        if conn_info not in self._idle[chain_id]:
                            continue
                        self._idle[chain_id].remove(conn_info)

                    await self._check_connection(chain_id, conn_info)

    async def _check_connection(self, chain_id: int, conn_info: ConnectionInfo):
        idle_time = _now() - conn_info.last_used
        if idle_time.total_seconds() > self.max_idle_time:
            await self._remove_connection(chain_id, conn_info)
            return

        try:
            await asyncio.wait_for(
                conn_info.adapter.get_block_number(),
                timeout=self.connection_timeout
            )
        except Exception as e:
            logger.warning(f"Health check failed for chain {chain_id}: {e}")
            conn_info.is_healthy = False

            try:
                conn_info.is_healthy = await conn_info.adapter.connect()
            except Exception:
                conn_info.is_healthy = False
            if conn_info.is_healthy:
                logger.info(f"Reconnected to chain {chain_id}")

        if conn_info.is_healthy:
            async with self._locks[chain_id]:
                self._idle[chain_id].append(conn_info)
        else:
            await self._remove_connection(chain_id, conn_info)

    async def _discard_adapter(self, chain_id: int, adapter: IChainAdapter):
        try:
            await adapter.disconnect()
        except Exception as e:
            logger.error(f"Error disconnecting from chain {chain_id}: {e}")

    async def _remove_connection(self, chain_id: int, conn_info: ConnectionInfo):
        """Remove a connection from the pool"""
        await self._discard_adapter(chain_id, conn_info.adapter)

        async with self._locks[chain_id]:
            if conn_info in self._pools[chain_id]:
                self._pools[chain_id].remove(conn_info)
                logger.info(f"Removed connection for chain {chain_id}")

    def get_pool_stats(self) -> Dict[int, Dict[str, Any]]:
        """Get statistics about the connection pool"""
        stats = {}
        for chain_id, connections in self._pools.items():
            stats[chain_id] = {
                "total": len(connections),
                "idle": len(self._idle[chain_id]),
                "healthy": sum(1 for c in connections if c.is_healthy),
                "total_uses": sum(c.use_count for c in connections)
            }
        return stats
