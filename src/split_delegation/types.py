"""
Core types and enums for split delegation across supported chains.
"""

from enum import Enum
from typing import Optional, Dict, Any
from decimal import Decimal
from dataclasses import dataclass


DEFAULT_DELEGATES_CONTRACT = "0xDE1e8A7E184Babd9F0E3af18f40634e9Ed6F0905"
DEFAULT_SET_DELEGATION_GAS_LIMIT = 250000

# Gas units used to approximate the fee shown next to a balance
FEE_APPROXIMATION_GAS = 250000


class ChainFamily(Enum):
    """Families of chains sharing one RPC adapter implementation"""
    EVM = "evm"


class TransactionStatus(Enum):
    """Confirmation state of a submitted transaction"""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ChainConfig:
    """Immutable descriptor of a supported chain"""
    chain_id: int
    name: str
    public_name: str
    symbol: str
    rpc_url: str
    decimals: int = 18
    tx_scan_template: str = ""
    delegates_contract: str = DEFAULT_DELEGATES_CONTRACT
    set_delegation_gas_limit: int = DEFAULT_SET_DELEGATION_GAS_LIMIT
    family: ChainFamily = ChainFamily.EVM


@dataclass(frozen=True)
class GasEstimate:
    """Fee market snapshot for the set-delegation call"""
    gas_limit: int
    gas_price: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


@dataclass(frozen=True)
class ChainInfo:
    """Balance and fee approximation of an address on one chain"""
    id: int
    name: str
    balance: Decimal
    symbol: str
    fee_approximation: Decimal
    tx_scan_template: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "balance": float(self.balance),
            "symbol": self.symbol,
            "fee_approximation": float(self.fee_approximation),
            "tx_scan_template": self.tx_scan_template,
        }


class BlockchainError(Exception):
    """Base exception for split delegation operations"""
    def __init__(self, message: str, chain_id: Optional[int] = None,
                 operation: Optional[str] = None):
        self.chain_id = chain_id
        self.operation = operation
        super().__init__(message)


class ChainUnreachableError(BlockchainError):
    """RPC dial or call failed; safe to retry"""
    pass


class UnknownChainError(BlockchainError):
    """Requested chain is not registered"""
    def __init__(self, chain_id: int):
        super().__init__(f"chain with id {chain_id} not found", chain_id=chain_id)


class EstimateFeeError(BlockchainError):
    """Fee market could not be queried"""
    pass


class ABIEncodingError(BlockchainError):
    """Call arguments cannot be encoded"""
    pass
