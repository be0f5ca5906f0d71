"""Change events announced by a table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from memtable.domain.entities.row import Row


class ChangeKind(str, Enum):
    """Kind of row-level change."""

    ADDED = "added"
    REMOVED = "removed"
    EDITED = "edited"


@dataclass(frozen=True, eq=False)
class ChangeEvent:
    """One row-level change.

    ``row`` is the live row object (for a removed row, the detached one);
    ``values`` is a copy of its values taken when the event was emitted,
    so later edits to the row do not alter the event. Events compare and
    hash by identity.
    """

    kind: ChangeKind
    row: Row = field(repr=False, compare=False)
    values: dict[str, Any] = field(default_factory=dict)
