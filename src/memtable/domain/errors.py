"""Error taxonomy for memtable.

Every error is raised synchronously at the point of violation. None of
them is transient, so nothing in the library retries.
"""

from __future__ import annotations

from typing import Any, Iterable


class MemtableError(Exception):
    """Base class for all memtable errors."""

    pass


class SchemaMismatchError(MemtableError, ValueError):
    """Row data's key set does not exactly equal the schema's key set."""

    def __init__(self, missing: Iterable[str] = (), unexpected: Iterable[str] = ()) -> None:
        self.missing = tuple(missing)
        self.unexpected = tuple(unexpected)
        parts = []
        if self.missing:
            parts.append(f"missing columns {list(self.missing)}")
        if self.unexpected:
            parts.append(f"unexpected columns {list(self.unexpected)}")
        super().__init__("Row does not match table schema: " + "; ".join(parts))


class ColumnNotFoundError(MemtableError, KeyError):
    """Referenced column does not exist in the schema."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Column does not exist: {column}")

    def __str__(self) -> str:
        # KeyError quotes its argument
        return str(self.args[0])


class TypeMismatchError(MemtableError, TypeError):
    """Supplied value's type does not match the column's declared type."""

    def __init__(self, column: str, expected: Any, value: Any) -> None:
        self.column = column
        self.expected = expected
        self.value = value
        super().__init__(
            f"Value {value!r} is not of type {expected} for column {column}"
        )


class TableNotFoundError(MemtableError, KeyError):
    """Referenced table name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Table not found: {name}")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidFilterTypeError(MemtableError, ValueError):
    """Unrecognized filter kind requested."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"Invalid filter type: {kind!r}")


class MissingValueError(MemtableError, RuntimeError):
    """A schema column has no stored value.

    Unreachable while the row construction invariant holds; seeing it
    means a bug, not bad input.
    """

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Missing value for column: {column}")


class SubscriptionClosedError(MemtableError):
    """A closed and drained subscription was read from."""

    pass
