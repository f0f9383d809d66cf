"""
Utility functions for chain values and addresses.
"""

from decimal import Decimal
from fractions import Fraction
from typing import Union

from eth_utils import is_address, is_hex, to_checksum_address


Number = Union[int, str, Decimal, Fraction, float]


def validate_address(address: str) -> bool:
    """Validate EVM address format"""
    return isinstance(address, str) and is_address(address)


def normalize_address(address: str) -> str:
    """Normalize address to checksum format"""
    return to_checksum_address(address)


def validate_tx_hash(tx_hash: str) -> bool:
    """A transaction hash is 32 bytes of 0x-prefixed hex"""
    return (isinstance(tx_hash, str) and tx_hash.startswith("0x")
            and len(tx_hash) == 66 and is_hex(tx_hash))


def to_hex_quantity(value: int) -> str:
    """Encode an integer the way JSON-RPC quantities are encoded"""
    if value < 0:
        raise ValueError(f"Negative quantity: {value}")
    return hex(value)


def format_units(value: int, decimals: int) -> Decimal:
    """Convert an amount in the smallest unit to human units"""
    return Decimal(value).scaleb(-decimals)


def to_fraction(value: Number) -> Fraction:
    """Exact rational value of a percent.

    Floats go through their shortest repr, so 33.3 becomes 333/10 and
    not the nearest binary double.
    """
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid percent")
    if isinstance(value, float):
        value = Decimal(repr(value))
    elif isinstance(value, str):
        value = Decimal(value)
    return Fraction(value)
