"""
Counting Bloom Filter implementation for bloomcount.

This module provides the Counting Bloom Filter, a Bloom filter variant that
replaces single bits with counters so that items can be deleted again. Every
operation returns an ``OperationRecord`` describing the positions it touched,
which makes the filter easy to inspect, visualise and test.

References:
    - Fan, L., Cao, P., Almeida, J., & Broder, A. Z. (2000).
      Summary cache: a scalable wide-area web cache sharing protocol.
      IEEE/ACM Transactions on Networking, 8(3), 281-293.
"""

import array
import math
import sys
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from bloomcount.algorithms.bloom.records import OperationKind, OperationRecord
from bloomcount.core.base import MembershipFilter
from bloomcount.core.errors import InvalidConfigurationError, ItemNotPresentError
from bloomcount.core.hash import hash_indices


def estimate_false_positive_rate(
    capacity: int, hash_count: int, item_count: int, exact: bool = False
) -> float:
    """
    Estimate the false positive probability of a Bloom filter.

    By default this uses the asymptotic approximation ``(1 - e^(-k*n/m))^k``.
    With ``exact=True`` it uses ``(1 - (1 - 1/m)^(k*n))^k`` instead. The two
    agree closely once m is more than a few dozen slots.

    Args:
        capacity: Number of counter slots (m).
        hash_count: Number of hash positions per item (k).
        item_count: Number of inserted items (n), duplicates included.
        exact: Use the exact form instead of the approximation.

    Returns:
        The estimated false positive rate in ``[0, 1]``.

    Raises:
        InvalidConfigurationError: If capacity or hash_count is less than 1.
        ValueError: If item_count is negative.
    """
    if capacity < 1:
        raise InvalidConfigurationError("capacity", capacity)
    if hash_count < 1:
        raise InvalidConfigurationError("hash_count", hash_count)
    if item_count < 0:
        raise ValueError(f"Item count must be non-negative, got {item_count}")
    if item_count == 0:
        return 0.0

    if exact:
        fill = 1.0 - (1.0 - 1.0 / capacity) ** (hash_count * item_count)
    else:
        fill = 1.0 - math.exp(-hash_count * item_count / capacity)
    return fill**hash_count


class CountingBloomFilter(MembershipFilter[str, OperationRecord]):
    """
    Counting Bloom Filter for set membership testing with deletion support.

    Each of the ``capacity`` slots holds a counter. Inserting an item
    increments the counters at its ``hash_count`` derived positions and
    deleting it decrements them again. A check reports a match only if all of
    the item's counters are non-zero, so there are no false negatives; false
    positives arise when other members happen to cover every position.

    The filter also keeps the list of inserted items. It is never consulted
    for membership decisions, only to flag checks that matched an item which
    was never inserted (false positives) and to refuse deleting such items.

    Counters are unsigned 64-bit values. Increments saturate at
    ``COUNTER_MAX`` and decrements stop at zero, so a counter can never go
    negative.

    The filter is not thread-safe; callers sharing an instance must serialise
    access to it.

    Example:
        cbf = CountingBloomFilter(capacity=20, hash_count=3)

        cbf.insert("alpha")
        cbf.check("alpha").matched  # True

        cbf.delete("alpha")
        cbf.check("alpha").matched  # False
    """

    DEFAULT_CAPACITY = 20
    DEFAULT_HASH_COUNT = 3
    MAX_HASH_COUNT = 32
    COUNTER_MAX = (1 << 64) - 1

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        hash_count: int = DEFAULT_HASH_COUNT,
    ):
        """
        Initialize a new Counting Bloom filter.

        Args:
            capacity: Number of counter slots (m). Must be at least 1.
            hash_count: Number of positions derived per item (k).
                        Must be between 1 and MAX_HASH_COUNT.

        Raises:
            TypeError: If capacity or hash_count is not an integer.
            InvalidConfigurationError: If capacity is less than 1, or
                                       hash_count is outside [1, MAX_HASH_COUNT].
        """
        for name, value in (("capacity", capacity), ("hash_count", hash_count)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {type(value)}")

        if capacity < 1:
            raise InvalidConfigurationError("capacity", capacity)
        if hash_count < 1:
            raise InvalidConfigurationError("hash_count", hash_count)
        if hash_count > self.MAX_HASH_COUNT:
            raise InvalidConfigurationError(
                "hash_count", hash_count, f"must be at most {self.MAX_HASH_COUNT}"
            )

        super().__init__()

        self._capacity = capacity
        self._hash_count = hash_count

        # 'Q' is an unsigned 64-bit counter per slot
        self._counters = array.array("Q", [0] * capacity)
        self._reset_members()

    @classmethod
    def create_for(
        cls, expected_items: int, false_positive_rate: float = 0.01
    ) -> "CountingBloomFilter":
        """
        Create a filter sized for a target false positive rate.

        Uses the standard optimal parameters ``m = -n ln(p) / (ln 2)^2`` and
        ``k = (m / n) ln 2``, with k clamped to ``[1, MAX_HASH_COUNT]``.

        Args:
            expected_items: Expected number of items held at once.
            false_positive_rate: Target false positive rate (between 0 and 1).

        Returns:
            A new, empty CountingBloomFilter.

        Raises:
            InvalidConfigurationError: If expected_items is less than 1 or the
                                       rate is not strictly between 0 and 1.
        """
        if expected_items < 1:
            raise InvalidConfigurationError("expected_items", expected_items)
        if not (0 < false_positive_rate < 1):
            raise InvalidConfigurationError(
                "false_positive_rate",
                false_positive_rate,
                "must be between 0 and 1",
            )

        capacity = math.ceil(
            -(expected_items * math.log(false_positive_rate)) / (math.log(2) ** 2)
        )
        hash_count = round((capacity / expected_items) * math.log(2))
        hash_count = min(max(1, hash_count), cls.MAX_HASH_COUNT)

        return cls(capacity=max(1, capacity), hash_count=hash_count)

    # --- Counter access ---

    def _get_counter(self, position: int) -> int:
        """
        Get the counter value at a position without bounds checking.

        Args:
            position: Counter position (0 <= position < capacity).

        Returns:
            The value of the counter at the given position.
        """
        return self._counters[position]

    def _increment_counter(self, position: int) -> bool:
        """
        Increment the counter at the given position, capping at COUNTER_MAX.

        Returns:
            True if the counter changed, False if it was already saturated.
        """
        if self._counters[position] < self.COUNTER_MAX:
            self._counters[position] += 1
            return True
        return False

    def _decrement_counter(self, position: int) -> bool:
        """
        Decrement the counter at the given position, stopping at 0.

        Returns:
            True if the counter changed, False if it was already zero.
        """
        if self._counters[position] > 0:
            self._counters[position] -= 1
            return True
        return False

    def _validate_item(self, item: str) -> None:
        """
        Check that an item can be stored in the filter.

        Raises:
            TypeError: If item is not a string.
        """
        if not isinstance(item, str):
            raise TypeError(f"Items must be strings, got {type(item)}")

    # --- Member bookkeeping ---

    def _reset_members(self) -> None:
        """Forget all members."""
        # Insertion-ordered entries; None marks a deleted entry
        self._members: List[Optional[str]] = []
        # Live entry positions per item, oldest first
        self._member_slots: Dict[str, Deque[int]] = {}
        self._deleted_slots = 0

    def _add_member(self, item: str) -> None:
        self._member_slots.setdefault(item, deque()).append(len(self._members))
        self._members.append(item)

    def _remove_member(self, item: str) -> None:
        """
        Remove the oldest entry of an item from the member list.

        Entries are blanked rather than removed so that deletion does not scan
        the list. The list is compacted once more than half of it is blank.
        """
        slots = self._member_slots[item]
        slot = slots.popleft()
        if not slots:
            del self._member_slots[item]

        self._members[slot] = None
        self._deleted_slots += 1

        if self._deleted_slots * 2 > len(self._members):
            live = [member for member in self._members if member is not None]
            self._members = []
            self._member_slots = {}
            self._deleted_slots = 0
            for member in live:
                self._add_member(member)

    def member_count(self, item: str) -> int:
        """
        Get how many times an item is currently a member.

        Args:
            item: The item to look up.

        Returns:
            Number of inserts of the item not yet matched by a delete.
        """
        return len(self._member_slots.get(item, ()))

    def hash_indices(self, item: str) -> List[int]:
        """
        Get the counter positions for an item under this filter's configuration.

        Args:
            item: The item to hash.

        Returns:
            List of ``hash_count`` positions in ``[0, capacity)``.
        """
        return hash_indices(item, self._capacity, self._hash_count)

    # --- Operations ---

    def insert(self, item: str) -> OperationRecord:
        """
        Add an item to the filter.

        Increments the counter at each of the item's positions (a position
        derived twice is incremented twice) and records the item as a member.
        Inserting the same item again is allowed and raises its counters further.

        Args:
            item: The item to add.

        Returns:
            An INSERT record.

        Raises:
            TypeError: If item is not a string.
        """
        self._validate_item(item)
        super().insert(item)

        positions = self.hash_indices(item)
        changed = {p for p in positions if self._increment_counter(p)}
        self._add_member(item)

        return OperationRecord(
            kind=OperationKind.INSERT,
            item=item,
            indices=tuple(positions),
            changed_indices=tuple(sorted(changed)),
        )

    def check(self, item: str) -> OperationRecord:
        """
        Test if an item might be in the set.

        This never modifies the filter. An item that was inserted and not
        deleted always matches.

        Args:
            item: The item to test.

        Returns:
            A CHECK record. ``matched`` is True if every counter is non-zero,
            ``missing_indices`` lists the positions whose counter is zero and
            ``false_positive`` flags a match for an item that is not a member.

        Raises:
            TypeError: If item is not a string.
        """
        self._validate_item(item)

        positions = self.hash_indices(item)
        missing = tuple(p for p in positions if self._get_counter(p) == 0)
        matched = not missing

        return OperationRecord(
            kind=OperationKind.CHECK,
            item=item,
            indices=tuple(positions),
            matched=matched,
            false_positive=matched and item not in self._member_slots,
            missing_indices=missing,
        )

    def delete(self, item: str) -> OperationRecord:
        """
        Remove one occurrence of an item from the filter.

        The membership check happens before any counter is touched, so a
        failed delete leaves the filter unchanged.

        Args:
            item: The item to remove.

        Returns:
            A DELETE record.

        Raises:
            TypeError: If item is not a string.
            ItemNotPresentError: If the item is not currently a member.
        """
        self._validate_item(item)
        if item not in self._member_slots:
            raise ItemNotPresentError(item)

        positions = self.hash_indices(item)
        changed = {p for p in positions if self._decrement_counter(p)}
        self._remove_member(item)

        return OperationRecord(
            kind=OperationKind.DELETE,
            item=item,
            indices=tuple(positions),
            changed_indices=tuple(sorted(changed)),
        )

    def __contains__(self, item: str) -> bool:
        return self.check(item).matched

    def __len__(self) -> int:
        return len(self._members) - self._deleted_slots

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(capacity={self._capacity}, "
            f"hash_count={self._hash_count}, members={len(self)})"
        )

    # --- Lifecycle ---

    def reset(
        self, capacity: Optional[int] = None, hash_count: Optional[int] = None
    ) -> "CountingBloomFilter":
        """
        Create a new, empty filter, optionally with a different configuration.

        The existing filter is left untouched; a filter is never resized in
        place because its members would have to be rehashed.

        Args:
            capacity: New number of slots, or None to keep the current one.
            hash_count: New number of hash positions, or None to keep the current one.

        Returns:
            A new CountingBloomFilter.
        """
        return self.__class__(
            capacity=self._capacity if capacity is None else capacity,
            hash_count=self._hash_count if hash_count is None else hash_count,
        )

    def clear(self) -> None:
        """
        Reset the filter to its initial empty state.

        Zeroes all counters and forgets all members but keeps the configuration.
        """
        super().clear()
        self._counters = array.array("Q", [0] * self._capacity)
        self._reset_members()

    # --- Snapshot accessors ---

    @property
    def capacity(self) -> int:
        """Number of counter slots (m)."""
        return self._capacity

    @property
    def hash_count(self) -> int:
        """Number of positions derived per item (k)."""
        return self._hash_count

    @property
    def counters(self) -> Tuple[int, ...]:
        """A copy of the counter values, indexed by position."""
        return tuple(self._counters)

    @property
    def members(self) -> Tuple[str, ...]:
        """A copy of the current members in insertion order, duplicates included."""
        return tuple(member for member in self._members if member is not None)

    def counter_at(self, position: int) -> int:
        """
        Get the counter value at a position.

        Raises:
            IndexError: If position is outside ``[0, capacity)``.
        """
        if not (0 <= position < self._capacity):
            raise IndexError(
                f"Counter position {position} out of range (0 to {self._capacity - 1})"
            )
        return self._get_counter(position)

    @property
    def filled_count(self) -> int:
        """Number of counters that are non-zero."""
        return sum(1 for value in self._counters if value > 0)

    @property
    def fill_rate(self) -> float:
        """Fraction of counters that are non-zero."""
        return self.filled_count / self._capacity

    def estimated_false_positive_rate(
        self, item_count: Optional[int] = None, exact: bool = False
    ) -> float:
        """
        Estimate the false positive rate of this filter.

        Args:
            item_count: Number of items to assume; defaults to the current
                        member count (duplicates included).
            exact: Use the exact form instead of the asymptotic approximation.

        Returns:
            The estimated false positive rate.
        """
        if item_count is None:
            item_count = len(self)
        return estimate_false_positive_rate(
            self._capacity, self._hash_count, item_count, exact=exact
        )

    # --- Statistics ---

    def error_bounds(self) -> Dict[str, float]:
        """
        Get the theoretical false positive rates at the current load.

        Returns:
            A dictionary with the approximate and exact false positive rates.
        """
        return {
            "false_positive_rate": self.estimated_false_positive_rate(),
            "false_positive_rate_exact": self.estimated_false_positive_rate(
                exact=True
            ),
        }

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of the filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        size = super().estimate_size()
        size += sys.getsizeof(self._counters)
        size += sys.getsizeof(self._members)
        size += sys.getsizeof(self._member_slots)
        size += sum(sys.getsizeof(member) for member in self._member_slots)
        return size

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the filter.

        Returns:
            A dictionary containing the configuration, load, fill and counter
            distribution of the filter.
        """
        stats = super().get_stats()
        stats.update(
            {
                "capacity": self._capacity,
                "hash_count": self._hash_count,
                "member_count": len(self),
                "filled_count": self.filled_count,
                "fill_rate": self.fill_rate,
                "counter_stats": self._calculate_counter_stats(),
            }
        )
        return stats

    def _calculate_counter_stats(self) -> Dict[str, Any]:
        """
        Calculate statistics about counter values in the filter.

        Returns:
            A dictionary with counter statistics.
        """
        values = self._counters
        zero_counters = sum(1 for value in values if value == 0)

        distribution: Dict[str, int] = {}
        for value in values:
            bin_label = self._get_counter_bin(value)
            distribution[bin_label] = distribution.get(bin_label, 0) + 1

        return {
            "zero_counter_pct": (zero_counters / self._capacity) * 100,
            "max_observed": max(values),
            "avg_counter": sum(values) / self._capacity,
            "counter_distribution": distribution,
        }

    @staticmethod
    def _get_counter_bin(value: int) -> str:
        """
        Group counter values into distribution bins for statistics.

        Args:
            value: The counter value.

        Returns:
            A string representing the bin label.
        """
        if value <= 2:
            return str(value)
        if value <= 4:
            return "3-4"
        if value <= 8:
            return "5-8"
        return "9+"
