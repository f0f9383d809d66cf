"""
Interfaces (protocols) for chain access and delegation collaborators.
Using Python's Protocol for structural subtyping.
"""

from typing import Protocol, Dict, Any, Optional, Tuple
from abc import abstractmethod
from datetime import datetime

from .types import ChainConfig


class IChainAdapter(Protocol):
    """RPC capabilities of a single chain, implemented once per chain family"""

    @property
    @abstractmethod
    def config(self) -> ChainConfig:
        ...

    @abstractmethod
    async def connect(self) -> bool:
        """Connect to the chain node"""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the node connection"""
        ...

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Native balance in the smallest unit"""
        ...

    @abstractmethod
    async def suggest_gas_price(self) -> int:
        """Node's suggested gas price in wei"""
        ...

    @abstractmethod
    async def suggest_gas_tip_cap(self) -> int:
        """Node's suggested priority fee per gas in wei"""
        ...

    @abstractmethod
    async def get_transaction(self, tx_hash: str) -> Tuple[Dict[str, Any], bool]:
        """Transaction by hash and whether it is still pending"""
        ...

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Dict[str, Any]:
        """Receipt of a mined transaction"""
        ...

    @abstractmethod
    async def get_block_number(self) -> int:
        """Latest block number, used as a liveness probe"""
        ...


class IDelegationStore(Protocol):
    """Persists delegations confirmed by the client"""

    @abstractmethod
    async def store_delegated(self, user_id: str, dao_id: str, tx_hash: str,
                              delegates: str, expiration: Optional[datetime]) -> None:
        ...
