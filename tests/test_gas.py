"""
Tests for fee estimation
"""

import pytest

from split_delegation import EstimateFeeError, GasEstimator, UnknownChainError

from conftest import ETH_CHAIN_ID, GNOSIS_CHAIN_ID


@pytest.fixture
def estimator(registry):
    return GasEstimator(registry)


class TestGasEstimator:

    @pytest.mark.asyncio
    async def test_estimate(self, estimator):
        estimate = await estimator.estimate(ETH_CHAIN_ID)

        assert estimate.gas_price == 20000000000
        assert estimate.max_priority_fee_per_gas == 1000000000
        assert estimate.max_fee_per_gas == 20000000000
        assert estimate.gas_limit == 250000

    @pytest.mark.asyncio
    async def test_gas_limit_is_per_chain(self, estimator):
        estimate = await estimator.estimate(GNOSIS_CHAIN_ID)
        assert estimate.gas_limit == 300000

    @pytest.mark.asyncio
    async def test_max_fee_never_below_tip(self, estimator, nodes):
        nodes[ETH_CHAIN_ID].gas_price = 1
        nodes[ETH_CHAIN_ID].tip_cap = 5

        estimate = await estimator.estimate(ETH_CHAIN_ID)
        assert estimate.max_fee_per_gas == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["gas_price", "tip_cap"])
    async def test_node_failure(self, estimator, nodes, operation):
        nodes[ETH_CHAIN_ID].failures.add(operation)

        with pytest.raises(EstimateFeeError) as exc_info:
            await estimator.estimate(ETH_CHAIN_ID)
        assert exc_info.value.chain_id == ETH_CHAIN_ID

    @pytest.mark.asyncio
    async def test_unknown_chain(self, estimator):
        with pytest.raises(UnknownChainError):
            await estimator.estimate(137)
