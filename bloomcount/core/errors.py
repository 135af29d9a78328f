"""
Exceptions raised by bloomcount filters.
"""

from typing import Any


class InvalidConfigurationError(ValueError):
    """Raised when a filter is configured with an out-of-range parameter."""

    def __init__(self, field: str, value: Any, reason: str = "must be at least 1"):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class ItemNotPresentError(LookupError):
    """
    Raised when deleting an item that is not currently in the filter.

    Decrementing the counters of an item that was never inserted would
    under-count slots shared with real members, so the delete is refused
    before any counter is touched.
    """

    def __init__(self, item: Any):
        self.item = item
        super().__init__(f"{item!r} is not in the set, cannot delete")
