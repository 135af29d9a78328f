"""
Algorithm implementations for bloomcount.
"""

from bloomcount.algorithms.bloom import CountingBloomFilter

__all__ = [
    "CountingBloomFilter",
]
