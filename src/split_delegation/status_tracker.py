"""
Confirmation state of submitted transactions.
"""

import logging

from .types import TransactionStatus
from .registry import ChainRegistry
from .utils import validate_tx_hash

logger = logging.getLogger(__name__)

RECEIPT_STATUS_SUCCESSFUL = 1


class StatusTracker:
    """
    Answers pending / success / failed for a transaction hash.

    Every call asks the node again; nothing is cached and nothing is retried.
    A node error is raised as ChainUnreachableError and never reported as
    a failed transaction.
    """

    def __init__(self, registry: ChainRegistry):
        self.registry = registry

    async def get_tx_status(self, chain_id: int, tx_hash: str) -> TransactionStatus:
        """
        Raises:
            ValueError: If the hash is malformed
            UnknownChainError: If the chain is not registered
            ChainUnreachableError: If the node cannot answer or does not know
                the hash
        """
        if not validate_tx_hash(tx_hash):
            raise ValueError(f"Invalid transaction hash: {tx_hash}")
        self.registry.get_config(chain_id)

        _, is_pending = await self.registry.transaction_by_hash(chain_id, tx_hash)
        if is_pending:
            return TransactionStatus.PENDING

        receipt = await self.registry.transaction_receipt(chain_id, tx_hash)
        if receipt.get("status") == RECEIPT_STATUS_SUCCESSFUL:
            return TransactionStatus.SUCCESS

        logger.info(f"Transaction {tx_hash} on chain {chain_id} reverted")
        return TransactionStatus.FAILED
