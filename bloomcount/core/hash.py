"""
Hashing functions for bloomcount.

This module provides the FNV-1a hash and the double-hashing scheme used to
derive counter positions. They are pure Python, deterministic across runs and
platforms, and not meant for cryptographic use.
"""

from typing import Any, Iterable, List

from bloomcount.core.errors import InvalidConfigurationError

FNV_PRIME = 16777619
FNV_OFFSET_BASIS = 2166136261

# Seeds for the two base hashes of the double-hashing scheme
H1_SEED = 0x811C9DC5
H2_SEED = 0x9E3779B9

_MASK_32 = 0xFFFFFFFF


def _code_units(key: Any) -> Iterable[int]:
    """
    Yield the integer units that FNV-1a folds into the hash.

    Strings are hashed per UTF-16 code unit, so characters outside the Basic
    Multilingual Plane contribute their two surrogate halves. Bytes are hashed
    per byte. Anything else is hashed through its repr().
    """
    if isinstance(key, bytes):
        return key
    if not isinstance(key, str):
        key = repr(key)

    encoded = key.encode("utf-16-le", "surrogatepass")
    return (
        encoded[i] | (encoded[i + 1] << 8) for i in range(0, len(encoded), 2)
    )


def fnv1a_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (32-bit variant).

    Args:
        key: The key to hash. Strings are read as UTF-16 code units.
        seed: Optional seed value, XORed into the offset basis.

    Returns:
        32-bit unsigned hash value
    """
    h = (FNV_OFFSET_BASIS ^ seed) & _MASK_32

    for unit in _code_units(key):
        h ^= unit
        h = (h * FNV_PRIME) & _MASK_32

    return h


def hash_indices(item: Any, capacity: int, hash_count: int) -> List[int]:
    """
    Derive the counter positions for an item using double hashing.

    Two FNV-1a hashes with different seeds are combined as
    ``(h1 + i * h2) mod 2**32`` and reduced modulo the capacity, which is far
    cheaper than computing k independent hash functions.

    Args:
        item: The item to hash.
        capacity: Number of counter slots (m).
        hash_count: Number of positions to derive (k).

    Returns:
        List of ``hash_count`` positions in ``[0, capacity)``. Positions may repeat.

    Raises:
        TypeError: If capacity or hash_count is not an integer.
        InvalidConfigurationError: If capacity or hash_count is less than 1.
    """
    for name, value in (("capacity", capacity), ("hash_count", hash_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an integer, got {type(value)}")

    if capacity < 1:
        raise InvalidConfigurationError("capacity", capacity)
    if hash_count < 1:
        raise InvalidConfigurationError("hash_count", hash_count)

    h1 = fnv1a_32(item, seed=H1_SEED)
    h2 = fnv1a_32(item, seed=H2_SEED)

    positions = []
    for i in range(hash_count):
        combined = (h1 + i * h2) & _MASK_32
        positions.append(combined % capacity)

    return positions
