"""
Split Delegation Gateway

Splits voting power across several delegates by percentage and prepares the
setDelegation transaction on any supported chain.
"""

from .types import (
    ChainFamily,
    TransactionStatus,
    ChainConfig,
    ChainInfo,
    GasEstimate,
    BlockchainError,
    ChainUnreachableError,
    UnknownChainError,
    EstimateFeeError,
    ABIEncodingError
)

from .interfaces import (
    IChainAdapter,
    IDelegationStore
)

from .models import (
    DelegateAllocation,
    PrepareSplitDelegationRequest,
    SuccessDelegationRequest,
    PreparedSplitDelegation,
    TxStatusWrapper
)

from .config import ChainSettings, GatewaySettings
from .connection_pool import ConnectionPool
from .adapter_factory import AdapterFactory
from .adapters import BaseAdapter, EVMAdapter
from .registry import ChainRegistry
from .ratio import RatioSet, calculate_ratios
from .gas import GasEstimator
from .transaction_builder import TransactionBuilder
from .status_tracker import StatusTracker
from .gateway import SplitDelegationGateway

__all__ = [
    # Types
    "ChainFamily",
    "TransactionStatus",
    "ChainConfig",
    "ChainInfo",
    "GasEstimate",
    "BlockchainError",
    "ChainUnreachableError",
    "UnknownChainError",
    "EstimateFeeError",
    "ABIEncodingError",

    # Interfaces
    "IChainAdapter",
    "IDelegationStore",

    # Models
    "DelegateAllocation",
    "PrepareSplitDelegationRequest",
    "SuccessDelegationRequest",
    "PreparedSplitDelegation",
    "TxStatusWrapper",

    # Configuration
    "ChainSettings",
    "GatewaySettings",

    # Connection Pool & Factory
    "ConnectionPool",
    "AdapterFactory",
    "BaseAdapter",
    "EVMAdapter",

    # Components
    "ChainRegistry",
    "RatioSet",
    "calculate_ratios",
    "GasEstimator",
    "TransactionBuilder",
    "StatusTracker",
    "SplitDelegationGateway"
]

__version__ = "1.0.0"
