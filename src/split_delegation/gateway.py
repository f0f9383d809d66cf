"""
Main split delegation gateway.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, List, Any

from .types import ChainInfo
from .models import (
    DelegateAllocation, PrepareSplitDelegationRequest, PreparedSplitDelegation,
    SuccessDelegationRequest, TxStatusWrapper
)
from .interfaces import IDelegationStore
from .config import GatewaySettings
from .connection_pool import AdapterBuilder
from .adapter_factory import AdapterFactory
from .registry import ChainRegistry
from .ratio import RatioSet, calculate_ratios
from .gas import GasEstimator
from .transaction_builder import TransactionBuilder, DEFAULT_EXPIRATION_TIMESTAMP
from .status_tracker import StatusTracker
from .utils import to_hex_quantity

logger = logging.getLogger(__name__)


class SplitDelegationGateway:
    """
    Entry point for split delegation.
    Prepares unsigned setDelegation transactions, reports their status and
    exposes per-chain balances of a delegator.
    """

    def __init__(self, registry: ChainRegistry,
                 delegation_store: Optional[IDelegationStore] = None,
                 request_timeout: Optional[float] = None):
        self.registry = registry
        self.delegation_store = delegation_store
        self.request_timeout = request_timeout

        self.gas_estimator = GasEstimator(registry)
        self.transaction_builder = TransactionBuilder()
        self.status_tracker = StatusTracker(registry)

    @classmethod
    def from_settings(cls, settings: GatewaySettings,
                      delegation_store: Optional[IDelegationStore] = None,
                      adapter_factory: AdapterBuilder = AdapterFactory.create_adapter) -> "SplitDelegationGateway":
        registry = ChainRegistry.from_settings(settings, adapter_factory=adapter_factory)
        return cls(registry, delegation_store=delegation_store,
                   request_timeout=settings.request_timeout)

    async def initialize(self):
        logger.info("Initializing split delegation gateway...")
        await self.registry.initialize()
        logger.info("Split delegation gateway initialized")

    async def shutdown(self):
        logger.info("Shutting down split delegation gateway...")
        await self.registry.close()
        logger.info("Split delegation gateway shutdown complete")

    def get_supported_chains(self) -> List[Dict[str, Any]]:
        """Get list of supported chains with their public settings"""
        return [
            {
                "chain_id": config.chain_id,
                "name": config.name,
                "public_name": config.public_name,
                "symbol": config.symbol,
                "decimals": config.decimals,
                "tx_scan_template": config.tx_scan_template,
                "delegates_contract": config.delegates_contract,
            }
            for config in self.registry.chains
        ]

    async def get_chains_info(self, address: str) -> Dict[str, ChainInfo]:
        """Balances and fee approximations of an address, keyed by chain name"""
        return await self.registry.get_chains_info(address, timeout=self.request_timeout)

    @staticmethod
    def calculate_delegate_ratios(delegates: List[DelegateAllocation]) -> RatioSet:
        return calculate_ratios((d.address, d.percent_of_delegated) for d in delegates)

    async def prepare_split_delegation(self, dao_alias: str,
                                       request: PrepareSplitDelegationRequest) -> PreparedSplitDelegation:
        """
        Build the unsigned setDelegation transaction for a split.

        Calldata is encoded before the node is asked for fees, so malformed
        input never costs a network call.

        Raises:
            UnknownChainError: If the chain is not registered
            ABIEncodingError: If a delegate address or the alias is malformed
            EstimateFeeError: If fees cannot be estimated
        """
        chain_id = request.chain_id
        contract_address = self.registry.get_delegates_contract_address(chain_id)

        ratios = self.calculate_delegate_ratios(request.delegates)
        calldata = self.transaction_builder.build_calldata(
            dao_alias, ratios, expiration_timestamp(request.expiration_date)
        )

        estimate = await self.gas_estimator.estimate(chain_id)

        logger.info(f"Prepared split delegation for {dao_alias} on chain {chain_id} "
                    f"with {len(ratios)} delegates")
        return PreparedSplitDelegation(
            to=contract_address,
            data=calldata,
            gas_price=to_hex_quantity(estimate.gas_price),
            max_priority_fee_per_gas=to_hex_quantity(estimate.max_priority_fee_per_gas),
            max_fee_per_gas=to_hex_quantity(estimate.max_fee_per_gas),
            gas=to_hex_quantity(estimate.gas_limit)
        )

    async def get_tx_status(self, chain_id: int, tx_hash: str) -> TxStatusWrapper:
        status = await self.status_tracker.get_tx_status(chain_id, tx_hash)
        return TxStatusWrapper(status=status)

    async def success_delegated(self, user_id: str, dao_id: str,
                                request: SuccessDelegationRequest) -> None:
        """Hand a delegation the client has broadcast to the delegation store"""
        if self.delegation_store is None:
            raise RuntimeError("No delegation store configured")

        self.registry.get_config(request.chain_id)
        delegates = json.dumps([
            {
                "address": d.address,
                "resolved_name": d.resolved_name or "",
                "percent_of_delegated": float(d.percent_of_delegated),
            }
            for d in request.delegates
        ])

        await self.delegation_store.store_delegated(
            user_id, dao_id, request.tx_hash, delegates, request.expiration_date
        )
        logger.info(f"Stored delegation {request.tx_hash} of user {user_id} for dao {dao_id}")


def expiration_timestamp(expiration: Optional[datetime]) -> int:
    """Unix timestamp of an expiration date, naive dates are taken as UTC"""
    if expiration is None:
        return DEFAULT_EXPIRATION_TIMESTAMP
    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)
    return int(expiration.timestamp())
