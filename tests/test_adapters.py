"""
Tests for the EVM adapter and the adapter factory
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from split_delegation import AdapterFactory, ChainFamily, EVMAdapter
from split_delegation.adapters import evm

from conftest import DELEGATOR, TX_HASH


async def _value(v):
    return v


class FakeEth:
    """web3's AsyncEth exposes awaitable properties"""

    def __init__(self, chain_id):
        self._chain_id = chain_id
        self.get_balance = AsyncMock(return_value=7)
        self.get_transaction = AsyncMock()
        self.get_transaction_receipt = AsyncMock(return_value={"status": 1})

    @property
    def chain_id(self):
        return _value(self._chain_id)

    @property
    def gas_price(self):
        return _value(20000000000)

    @property
    def max_priority_fee(self):
        return _value(1000000000)

    @property
    def block_number(self):
        return _value(123)


@pytest.fixture
def w3(monkeypatch):
    w3 = MagicMock()
    w3.is_connected = AsyncMock(return_value=True)
    w3.eth = FakeEth(chain_id=1)
    w3.provider = MagicMock(spec=["disconnect"])
    w3.provider.disconnect = AsyncMock()
    monkeypatch.setattr(evm, "AsyncHTTPProvider", MagicMock())
    monkeypatch.setattr(evm, "AsyncWeb3", MagicMock(return_value=w3))
    return w3


@pytest.fixture
def adapter(eth_config):
    return EVMAdapter(eth_config)


class TestEVMAdapter:

    @pytest.mark.asyncio
    async def test_connect(self, adapter, w3):
        assert await adapter.connect()
        assert adapter.is_connected
        evm.AsyncHTTPProvider.assert_called_once_with("http://eth.invalid")

    @pytest.mark.asyncio
    async def test_connect_refused(self, adapter, w3):
        w3.is_connected.return_value = False
        assert not await adapter.connect()
        assert not adapter.is_connected

    @pytest.mark.asyncio
    async def test_connect_error_is_reported_as_false(self, adapter, w3):
        w3.is_connected.side_effect = OSError("boom")
        assert not await adapter.connect()

    @pytest.mark.asyncio
    async def test_calls_require_connection(self, adapter, w3):
        with pytest.raises(ConnectionError):
            await adapter.get_balance(DELEGATOR)

    @pytest.mark.asyncio
    async def test_queries(self, adapter, w3):
        await adapter.connect()

        assert await adapter.get_balance(DELEGATOR.lower()) == 7
        assert await adapter.suggest_gas_price() == 20000000000
        assert await adapter.suggest_gas_tip_cap() == 1000000000
        assert await adapter.get_block_number() == 123
        assert await adapter.get_transaction_receipt(TX_HASH) == {"status": 1}
        w3.eth.get_balance.assert_awaited_once_with(DELEGATOR)

    @pytest.mark.asyncio
    async def test_pending_transaction(self, adapter, w3):
        await adapter.connect()

        w3.eth.get_transaction.return_value = {"hash": TX_HASH, "blockNumber": None}
        _, is_pending = await adapter.get_transaction(TX_HASH)
        assert is_pending

        w3.eth.get_transaction.return_value = {"hash": TX_HASH, "blockNumber": 99}
        tx, is_pending = await adapter.get_transaction(TX_HASH)
        assert not is_pending
        assert tx["blockNumber"] == 99

    @pytest.mark.asyncio
    async def test_disconnect(self, adapter, w3):
        await adapter.connect()
        await adapter.disconnect()

        w3.provider.disconnect.assert_awaited_once()
        assert not adapter.is_connected


class TestAdapterFactory:

    def test_evm_adapter(self, eth_config):
        adapter = AdapterFactory.create_adapter(eth_config)
        assert isinstance(adapter, EVMAdapter)
        assert adapter.chain_id == eth_config.chain_id
        assert not adapter.is_connected

    def test_family_supported(self):
        assert AdapterFactory.is_family_supported(ChainFamily.EVM)

    def test_register_adapter(self, monkeypatch, eth_config):
        monkeypatch.setattr(AdapterFactory, "_adapters", dict(AdapterFactory._adapters))

        class TracingAdapter(EVMAdapter):
            pass

        AdapterFactory.register_adapter(ChainFamily.EVM, TracingAdapter)
        assert isinstance(AdapterFactory.create_adapter(eth_config), TracingAdapter)
