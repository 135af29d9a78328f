"""
Base classes and interfaces for bloomcount filters.

This module defines the abstract base class that membership filters implement
so that they share a consistent interface for operations, statistics and
memory estimation.
"""

import abc
import sys
from typing import Any, Dict, Generic, TypeVar

T = TypeVar("T")  # Type for the items being processed
R = TypeVar("R")  # Type for the result of an operation


class MembershipFilter(Generic[T, R], abc.ABC):
    """
    Abstract base class for set-membership filters.

    Subclasses implement insertion, membership queries and deletion, each
    returning a result object describing what happened. The base class keeps
    the bookkeeping that is common to every filter and provides the hooks used
    for statistics and memory estimation.
    """

    def __init__(self) -> None:
        """Initialize the shared bookkeeping."""
        self._items_processed = 0

    @abc.abstractmethod
    def insert(self, item: T) -> R:
        """
        Add an item to the filter.

        Subclasses must call ``super().insert(item)`` so the processed-item
        count stays accurate.

        Args:
            item: The item to add.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def check(self, item: T) -> R:
        """
        Test whether an item might be in the filter.

        Args:
            item: The item to test.
        """
        pass

    @abc.abstractmethod
    def delete(self, item: T) -> R:
        """
        Remove a previously inserted item from the filter.

        Args:
            item: The item to remove.
        """
        pass

    def clear(self) -> None:
        """
        Reset the filter to its initial empty state.

        Derived classes must override this method to clear their own data
        structures and call ``super().clear()`` to reset the base counters.
        """
        self._items_processed = 0

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        This is a rough estimation covering the object itself and its instance
        dictionary. Derived classes should add their own data structures.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def error_bounds(self) -> Dict[str, float]:
        """
        Get the theoretical error bounds for this filter.

        The base implementation returns an empty dictionary.

        Returns:
            A dictionary containing error bound information.
        """
        return {}

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the filter.

        Derived classes should override this method to include their specific
        statistics while calling ``super().get_stats()`` to include base metrics.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    @property
    def items_processed(self) -> int:
        """Get the total number of insertions performed on this filter."""
        return self._items_processed
