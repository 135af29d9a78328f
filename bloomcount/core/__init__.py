"""
Core functionality for bloomcount.
"""

from bloomcount.core.base import MembershipFilter
from bloomcount.core.errors import InvalidConfigurationError, ItemNotPresentError
from bloomcount.core.hash import fnv1a_32, hash_indices

__all__ = [
    # Base classes
    "MembershipFilter",
    # Errors
    "InvalidConfigurationError",
    "ItemNotPresentError",
    # Utility functions
    "fnv1a_32",
    "hash_indices",
]
