"""
Request and response models exchanged with the delegation collaborators.
"""

from typing import Optional, List, Dict, Any
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, Field

from .types import TransactionStatus


class DelegateAllocation(BaseModel):
    address: str = Field(..., description="Delegate address")
    resolved_name: Optional[str] = Field(None, description="Resolved display name")
    percent_of_delegated: Decimal = Field(..., gt=0, le=100, description="Share of voting power")


class PrepareSplitDelegationRequest(BaseModel):
    chain_id: int = Field(..., description="Chain to submit the delegation on")
    delegates: List[DelegateAllocation] = Field(..., min_length=1)
    expiration_date: Optional[datetime] = Field(None, description="Delegation validity deadline")


class SuccessDelegationRequest(BaseModel):
    chain_id: int
    tx_hash: str
    delegates: List[DelegateAllocation]
    expiration_date: Optional[datetime] = None


class PreparedSplitDelegation(BaseModel):
    """Unsigned transaction fields, all 0x-prefixed hex strings"""
    to: str
    data: str
    gas_price: str
    max_priority_fee_per_gas: str
    max_fee_per_gas: str
    gas: str

    def to_transaction_dict(self) -> Dict[str, Any]:
        """Field names as expected by wallet RPC (eth_sendTransaction)"""
        return {
            "to": self.to,
            "data": self.data,
            "gasPrice": self.gas_price,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "gas": self.gas,
        }


class TxStatusWrapper(BaseModel):
    status: TransactionStatus
