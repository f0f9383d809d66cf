"""
EVM (Ethereum Virtual Machine) adapter for Ethereum-compatible chains.
Supports Ethereum, Gnosis and any other chain speaking the eth_* JSON-RPC.
"""

import inspect
import logging
from typing import Optional, Dict, Any, Tuple

from web3 import AsyncWeb3, AsyncHTTPProvider

from ..types import ChainConfig
from ..utils import normalize_address
from .base import BaseAdapter

logger = logging.getLogger(__name__)


class EVMAdapter(BaseAdapter):
    """Adapter for EVM-compatible chains"""

    def __init__(self, config: ChainConfig):
        super().__init__(config)
        self.w3: Optional[AsyncWeb3] = None

    async def connect(self) -> bool:
        """Connect to the EVM chain"""
        try:
            self.w3 = AsyncWeb3(AsyncHTTPProvider(self.config.rpc_url))

            if await self.w3.is_connected():
                chain_id = await self.w3.eth.chain_id
                if chain_id != self.config.chain_id:
                    logger.warning(f"Chain ID mismatch: expected {self.config.chain_id}, got {chain_id}")

                self._connected = True
                logger.info(f"Connected to {self.config.name} at {self.config.rpc_url}")
                return True
            else:
                logger.error(f"Failed to connect to {self.config.name}")
                return False

        except Exception as e:
            logger.error(f"Error connecting to {self.config.name}: {e}")
            return False

    async def disconnect(self) -> None:
        """Disconnect from the chain"""
        if self.w3 and hasattr(self.w3.provider, 'disconnect'):
            result = self.w3.provider.disconnect()
            if inspect.isawaitable(result):
                await result
        self._connected = False
        logger.info(f"Disconnected from {self.config.name}")

    async def get_balance(self, address: str) -> int:
        self._ensure_connected()
        return await self.w3.eth.get_balance(normalize_address(address))

    async def suggest_gas_price(self) -> int:
        self._ensure_connected()
        return await self.w3.eth.gas_price

    async def suggest_gas_tip_cap(self) -> int:
        self._ensure_connected()
        return await self.w3.eth.max_priority_fee

    async def get_transaction(self, tx_hash: str) -> Tuple[Dict[str, Any], bool]:
        """Get transaction by hash.

        A transaction the node knows but has not mined yet has no block
        number; that is what marks it pending.
        """
        self._ensure_connected()
        tx = await self.w3.eth.get_transaction(tx_hash)
        return dict(tx), tx.get('blockNumber') is None

    async def get_transaction_receipt(self, tx_hash: str) -> Dict[str, Any]:
        self._ensure_connected()
        receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
        return dict(receipt)

    async def get_block_number(self) -> int:
        self._ensure_connected()
        return await self.w3.eth.block_number
