"""
Bloom Filter implementations for bloomcount.

This includes:
- CountingBloomFilter: Bloom filter variant that supports item deletion
- OperationRecord: the result of every filter operation
"""

from bloomcount.algorithms.bloom.counting import (
    CountingBloomFilter,
    estimate_false_positive_rate,
)
from bloomcount.algorithms.bloom.records import OperationKind, OperationRecord

__all__ = [
    "CountingBloomFilter",
    "OperationKind",
    "OperationRecord",
    "estimate_false_positive_rate",
]
