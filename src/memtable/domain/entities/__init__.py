"""Domain entities for memtable.

Entities are objects with identity that have a lifecycle. Two rows with
the same values are still two different rows.

Exports:
    Row:
        - Row: Schema-validated mapping of column to value

    Table:
        - Table: Ordered, mutable collection of rows with change broadcast
        - ChangeEvent: One row-level change announced by a table
        - ChangeKind: ADDED, REMOVED or EDITED
"""

from memtable.domain.entities.change import ChangeEvent, ChangeKind
from memtable.domain.entities.row import Row
from memtable.domain.entities.table import Table

__all__ = [
    "Row",
    "Table",
    "ChangeEvent",
    "ChangeKind",
]
