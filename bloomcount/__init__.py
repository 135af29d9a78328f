"""
bloomcount - Counting Bloom Filter Library

bloomcount is a Python library providing an inspectable counting Bloom filter:
insert, check and delete items, and see exactly which counters each operation
touched.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from bloomcount.algorithms.bloom import (
    CountingBloomFilter,
    OperationKind,
    OperationRecord,
    estimate_false_positive_rate,
)
from bloomcount.core.errors import InvalidConfigurationError, ItemNotPresentError
from bloomcount.core.hash import fnv1a_32, hash_indices
from bloomcount.simulation import BloomSimulation

__all__ = [
    # Filter and results
    "CountingBloomFilter",
    "OperationKind",
    "OperationRecord",
    "estimate_false_positive_rate",
    # Errors
    "InvalidConfigurationError",
    "ItemNotPresentError",
    # Hashing
    "fnv1a_32",
    "hash_indices",
    # Driver
    "BloomSimulation",
]
