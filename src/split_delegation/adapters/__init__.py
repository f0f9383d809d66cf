"""
Chain adapter implementations.
"""

from .base import BaseAdapter
from .evm import EVMAdapter

__all__ = [
    "BaseAdapter",
    "EVMAdapter"
]
