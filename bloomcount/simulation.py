"""
Interactive driver state for a Counting Bloom Filter.

``BloomSimulation`` holds everything a front end needs to let a user play with
a filter: the current configuration, the filter itself, the most recent
operation and a short history. It accepts raw text input, ignores blank
entries, and turns a refused delete into a logged warning instead of an
exception. Rendering is left to whoever consumes it.
"""

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from bloomcount.algorithms.bloom.counting import CountingBloomFilter
from bloomcount.algorithms.bloom.records import OperationRecord
from bloomcount.core.errors import ItemNotPresentError

logger = logging.getLogger(__name__)


class BloomSimulation:
    """
    Stateful front end for a Counting Bloom Filter.

    Example:
        sim = BloomSimulation()
        sim.insert("  alpha ")     # stored as "alpha"
        sim.check("alpha").matched  # True
        sim.delete("ghost")        # None, logs a warning
        sim.configure(capacity=40, hash_count=4)  # starts over
    """

    DEFAULT_HISTORY = 50

    def __init__(
        self,
        capacity: int = CountingBloomFilter.DEFAULT_CAPACITY,
        hash_count: int = CountingBloomFilter.DEFAULT_HASH_COUNT,
        history_size: int = DEFAULT_HISTORY,
    ):
        if history_size < 1:
            raise ValueError("History size must be at least 1")

        self._filter = CountingBloomFilter(capacity=capacity, hash_count=hash_count)
        self._history: Deque[OperationRecord] = deque(maxlen=history_size)
        self._last_operation: Optional[OperationRecord] = None

    @property
    def filter(self) -> CountingBloomFilter:
        return self._filter

    @property
    def last_operation(self) -> Optional[OperationRecord]:
        return self._last_operation

    @property
    def history(self) -> List[OperationRecord]:
        """Recent operations, oldest first."""
        return list(self._history)

    def configure(self, capacity: int, hash_count: int) -> None:
        """
        Switch to a new configuration.

        The current filter is discarded together with its members, the last
        operation and the history.

        Raises:
            TypeError, InvalidConfigurationError: As for CountingBloomFilter.
        """
        self._filter = self._filter.reset(capacity=capacity, hash_count=hash_count)
        self._forget()
        logger.debug("Reconfigured filter: capacity=%d hash_count=%d", capacity, hash_count)

    def reset(self) -> None:
        """Empty the filter, keeping the current configuration."""
        self._filter = self._filter.reset()
        self._forget()
        logger.debug("Reset filter")

    def insert(self, text: str) -> Optional[OperationRecord]:
        """
        Insert the stripped text.

        Returns:
            The INSERT record, or None if the text is blank.
        """
        word = text.strip()
        if not word:
            return None
        return self._remember(self._filter.insert(word))

    def check(self, text: str) -> Optional[OperationRecord]:
        """
        Check the stripped text.

        Returns:
            The CHECK record, or None if the text is blank.
        """
        word = text.strip()
        if not word:
            return None
        return self._remember(self._filter.check(word))

    def delete(self, text: str) -> Optional[OperationRecord]:
        """
        Delete the stripped text.

        Returns:
            The DELETE record, or None if the text is blank or not in the set.
        """
        word = text.strip()
        if not word:
            return None

        try:
            record = self._filter.delete(word)
        except ItemNotPresentError:
            logger.warning('"%s" is not in the set, cannot delete.', word)
            return None
        return self._remember(record)

    def summary(self) -> Dict[str, Any]:
        """
        Get the figures a front end displays next to the filter.

        Returns:
            A dictionary with the configuration, item count, fill and
            false positive rates, and display strings for the two rates.
        """
        fill_rate = self._filter.fill_rate
        fp_rate = self._filter.estimated_false_positive_rate()
        return {
            "capacity": self._filter.capacity,
            "hash_count": self._filter.hash_count,
            "items": len(self._filter),
            "filled_count": self._filter.filled_count,
            "fill_rate": fill_rate,
            "fp_rate": fp_rate,
            "fill_rate_pct": f"{fill_rate * 100:.1f}%",
            "fp_rate_pct": f"{fp_rate * 100:.4f}%",
        }

    def _remember(self, record: OperationRecord) -> OperationRecord:
        self._last_operation = record
        self._history.append(record)
        logger.debug(
            "%s %r -> indices=%s matched=%s false_positive=%s",
            record.kind.value,
            record.item,
            list(record.indices),
            record.matched,
            record.false_positive,
        )
        return record

    def _forget(self) -> None:
        self._last_operation = None
        self._history.clear()
