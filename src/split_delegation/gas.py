"""
Fee market queries for the set-delegation call.
"""

import logging

from .types import GasEstimate, ChainUnreachableError, EstimateFeeError
from .registry import ChainRegistry

logger = logging.getLogger(__name__)


class GasEstimator:
    """
    Suggests fee parameters for a chain.
    The gas limit of the set-delegation call is a per-chain constant, only
    the prices come from the node.
    """

    def __init__(self, registry: ChainRegistry):
        self.registry = registry

    async def estimate(self, chain_id: int) -> GasEstimate:
        """
        Current fee parameters for a set-delegation transaction.

        Raises:
            UnknownChainError: If the chain is not registered
            EstimateFeeError: If the node cannot suggest a price; no partial
                estimate is ever returned
        """
        config = self.registry.get_config(chain_id)

        try:
            gas_price = await self.registry.suggest_gas_price(chain_id)
            tip_cap = await self.registry.suggest_gas_tip_cap(chain_id)
        except ChainUnreachableError as e:
            logger.warning(f"Fee estimation aborted for chain {config.name}")
            raise EstimateFeeError(
                f"cannot estimate fee for chain {config.name}: {e}",
                chain_id=chain_id,
                operation=e.operation
            ) from e

        # max fee is the suggested price, never below the tip
        return GasEstimate(
            gas_limit=config.set_delegation_gas_limit,
            gas_price=gas_price,
            max_fee_per_gas=max(gas_price, tip_cap),
            max_priority_fee_per_gas=tip_cap
        )
