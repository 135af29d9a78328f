"""
Operation records produced by bloomcount filters.

Every insert, check and delete returns an ``OperationRecord`` describing the
positions it touched and how the membership test turned out. Records are
plain immutable values; filters never keep them.
"""

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


class OperationKind(enum.Enum):
    """The kind of filter operation that produced a record."""

    INSERT = "insert"
    CHECK = "check"
    DELETE = "delete"


@dataclass(frozen=True)
class OperationRecord:
    """
    Outcome of a single filter operation.

    Attributes:
        kind: Which operation produced the record.
        item: The item value operated on.
        indices: The derived counter positions, in derivation order.
        matched: For a check, whether every counter at ``indices`` was non-zero.
                 Always True for inserts and deletes.
        false_positive: True for a check that matched an item which is not a member.
        missing_indices: For a check, the positions whose counter was zero.
        changed_indices: Sorted distinct positions whose counter the operation
                         actually modified. Empty for checks.
        timestamp: Wall-clock time at which the record was created.
    """

    kind: OperationKind
    item: str
    indices: Tuple[int, ...]
    matched: bool = True
    false_positive: bool = False
    missing_indices: Tuple[int, ...] = ()
    changed_indices: Tuple[int, ...] = ()
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the record to a dictionary.

        Returns:
            A dictionary representation of the record.
        """
        return {
            "kind": self.kind.value,
            "item": self.item,
            "indices": list(self.indices),
            "matched": self.matched,
            "false_positive": self.false_positive,
            "missing_indices": list(self.missing_indices),
            "changed_indices": list(self.changed_indices),
            "timestamp": self.timestamp,
        }
