"""
Configuration Module

Chain descriptors and pool tuning read from the environment, e.g.

    SPLIT_DELEGATION_CHAINS__ETH__ID=1
    SPLIT_DELEGATION_CHAINS__ETH__PUBLIC_NAME=Ethereum
    SPLIT_DELEGATION_CHAINS__ETH__SYMBOL=ETH
    SPLIT_DELEGATION_CHAINS__ETH__RPC_URL=https://eth.example.org

Setting any chain from the environment replaces the default chain map.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import (
    ChainConfig, ChainFamily,
    DEFAULT_DELEGATES_CONTRACT, DEFAULT_SET_DELEGATION_GAS_LIMIT
)
from .utils import validate_address, normalize_address

logger = logging.getLogger(__name__)


class ChainSettings(BaseModel):
    """Settings of a single chain"""

    id: int = Field(..., description="Numeric chain id")
    public_name: str = Field(..., description="Name shown to users")
    symbol: str = Field(..., description="Native currency symbol")
    rpc_url: str = Field(..., description="JSON-RPC endpoint")
    decimals: int = Field(18, ge=0)
    tx_scan_template: str = Field("", description="Explorer URL template for a tx hash")
    delegates_contract: str = Field(DEFAULT_DELEGATES_CONTRACT)
    set_delegation_gas_limit: int = Field(DEFAULT_SET_DELEGATION_GAS_LIMIT, gt=0)
    family: ChainFamily = ChainFamily.EVM

    @field_validator("delegates_contract")
    @classmethod
    def check_contract(cls, v):
        if not validate_address(v):
            raise ValueError(f"Invalid delegates contract address: {v}")
        return normalize_address(v)


def _default_chains() -> Dict[str, ChainSettings]:
    return {
        "eth": ChainSettings(
            id=1,
            public_name="Ethereum",
            symbol="ETH",
            rpc_url="https://ethereum-rpc.publicnode.com",
            tx_scan_template="https://etherscan.io/tx/%s",
        ),
        "gnosis": ChainSettings(
            id=100,
            public_name="Gnosis Chain",
            symbol="xDAI",
            rpc_url="https://gnosis-rpc.publicnode.com",
            tx_scan_template="https://gnosisscan.io/tx/%s",
        ),
    }


class GatewaySettings(BaseSettings):
    """Configuration of the split delegation gateway"""

    model_config = SettingsConfigDict(
        env_prefix="SPLIT_DELEGATION_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chains keyed by internal name
    chains: Dict[str, ChainSettings] = Field(default_factory=_default_chains)

    # Pool configuration
    max_connections_per_chain: int = Field(5, ge=1)
    connection_timeout: float = Field(30, gt=0)
    health_check_interval: Optional[float] = Field(60)
    max_idle_time: float = Field(300, gt=0)

    # Upper bound for a whole chains-info fan-out
    request_timeout: Optional[float] = Field(15)

    def chain_configs(self) -> List[ChainConfig]:
        """Build the immutable chain descriptors"""
        configs = []
        seen = set()
        for name, chain in self.chains.items():
            if chain.id in seen:
                raise ValueError(f"Duplicate chain id {chain.id} for {name}")
            seen.add(chain.id)
            configs.append(ChainConfig(
                chain_id=chain.id,
                name=name,
                public_name=chain.public_name,
                symbol=chain.symbol,
                rpc_url=chain.rpc_url,
                decimals=chain.decimals,
                tx_scan_template=chain.tx_scan_template,
                delegates_contract=chain.delegates_contract,
                set_delegation_gas_limit=chain.set_delegation_gas_limit,
                family=chain.family,
            ))
        logger.info(f"Loaded {len(configs)} chain configurations")
        return configs
