"""
Pytest configuration: in-memory chain nodes standing in for JSON-RPC.
"""

import asyncio
from typing import Dict, Any, Tuple

import pytest

from split_delegation import ChainConfig, ChainRegistry, ConnectionPool
from split_delegation.adapters import BaseAdapter

ETH_CHAIN_ID = 1
GNOSIS_CHAIN_ID = 100

DELEGATOR = "0x1234567890123456789012345678901234567890"
TX_HASH = "0x" + "a" * 64


class FakeNode:
    """Scripted answers of one chain node"""

    def __init__(self, balance=0, gas_price=0, tip_cap=0):
        self.balance = balance
        self.gas_price = gas_price
        self.tip_cap = tip_cap
        self.transactions: Dict[str, Tuple[Dict[str, Any], bool]] = {}
        self.receipts: Dict[str, Dict[str, Any]] = {}
        self.failures = set()
        self.delays: Dict[str, float] = {}
        self.reachable = True
        self.calls = []
        self.cancelled = []
        self.connects = 0
        self.disconnects = 0

    async def answer(self, operation, value, missing=False):
        self.calls.append(operation)
        try:
            if operation in self.delays:
                await asyncio.sleep(self.delays[operation])
        except asyncio.CancelledError:
            self.cancelled.append(operation)
            raise
        if missing:
            raise LookupError(f"{operation}: not found")
        if operation in self.failures:
            raise ConnectionError(f"{operation}: connection refused")
        return value


class FakeAdapter(BaseAdapter):
    def __init__(self, config: ChainConfig, node: FakeNode):
        super().__init__(config)
        self.node = node

    async def connect(self) -> bool:
        self.node.connects += 1
        if "connect" in self.node.delays:
            await asyncio.sleep(self.node.delays["connect"])
        self._connected = self.node.reachable
        return self._connected

    async def disconnect(self) -> None:
        self.node.disconnects += 1
        self._connected = False

    async def get_balance(self, address: str) -> int:
        return await self.node.answer("balance", self.node.balance)

    async def suggest_gas_price(self) -> int:
        return await self.node.answer("gas_price", self.node.gas_price)

    async def suggest_gas_tip_cap(self) -> int:
        return await self.node.answer("tip_cap", self.node.tip_cap)

    async def get_transaction(self, tx_hash: str):
        return await self.node.answer("transaction", self.node.transactions.get(tx_hash),
                                      missing=tx_hash not in self.node.transactions)

    async def get_transaction_receipt(self, tx_hash: str):
        return await self.node.answer("receipt", self.node.receipts.get(tx_hash),
                                      missing=tx_hash not in self.node.receipts)

    async def get_block_number(self) -> int:
        if not self.node.reachable:
            raise ConnectionError("node down")
        return await self.node.answer("block_number", 1)


@pytest.fixture
def eth_config():
    return ChainConfig(
        chain_id=ETH_CHAIN_ID,
        name="eth",
        public_name="Ethereum",
        symbol="ETH",
        rpc_url="http://eth.invalid",
        tx_scan_template="https://etherscan.io/tx/%s",
    )


@pytest.fixture
def gnosis_config():
    return ChainConfig(
        chain_id=GNOSIS_CHAIN_ID,
        name="gnosis",
        public_name="Gnosis Chain",
        symbol="xDAI",
        rpc_url="http://gnosis.invalid",
        tx_scan_template="https://gnosisscan.io/tx/%s",
        delegates_contract="0x00000000000000000000000000000000000000aa",
        set_delegation_gas_limit=300000,
    )


@pytest.fixture
def nodes():
    return {
        ETH_CHAIN_ID: FakeNode(
            balance=1500000000000000000,
            gas_price=20000000000,
            tip_cap=1000000000,
        ),
        GNOSIS_CHAIN_ID: FakeNode(
            balance=42000000000000000000,
            gas_price=2000000000,
            tip_cap=1000000000,
        ),
    }


@pytest.fixture
def adapter_factory(nodes):
    def build(config: ChainConfig) -> FakeAdapter:
        return FakeAdapter(config, nodes[config.chain_id])
    return build


@pytest.fixture
def pool(adapter_factory):
    return ConnectionPool(health_check_interval=None, adapter_factory=adapter_factory)


@pytest.fixture
def registry(eth_config, gnosis_config, pool):
    return ChainRegistry([eth_config, gnosis_config], pool)
