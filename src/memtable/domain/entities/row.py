"""Row entity: one schema-validated tuple of values."""

from __future__ import annotations

from typing import Any, Mapping

from memtable.domain.errors import (
    ColumnNotFoundError,
    MissingValueError,
    SchemaMismatchError,
    TypeMismatchError,
)
from memtable.domain.value_objects import Schema


class Row:
    """A row bound to exactly one schema.

    The row's key set always equals the schema's key set: construction
    rejects anything else, and ``set`` only replaces existing keys.
    Values are type-checked on construction and on every ``set``.

    Example:
        >>> schema = Schema({"name": StringType, "age": NumberType})
        >>> row = Row(schema, {"name": "Alice", "age": 30})
        >>> row.set("age", 31)
        >>> row.get("age")
        31
    """

    __slots__ = ("_schema", "_data")

    def __init__(self, schema: Schema, values: Mapping[str, Any]) -> None:
        """Create a row.

        Args:
            schema: The schema the row is bound to (shared, not copied)
            values: Initial value per column; keys must equal the schema's

        Raises:
            SchemaMismatchError: If the key sets differ
            TypeMismatchError: If a value does not fit its column type
        """
        keys = set(values)
        expected = set(schema.names)
        if keys != expected:
            raise SchemaMismatchError(
                missing=[c for c in schema.names if c not in keys],
                unexpected=sorted(keys - expected),
            )

        data: dict[str, Any] = {}
        for column, column_type in schema.columns.items():
            value = values[column]
            if not column_type.accepts(value):
                raise TypeMismatchError(column, column_type, value)
            data[column] = value

        self._schema = schema
        self._data = data

    @property
    def schema(self) -> Schema:
        return self._schema

    def get(self, column: str) -> Any:
        """Get the value of a column.

        Raises:
            ColumnNotFoundError: If the column is not in the schema
            MissingValueError: If a schema column has no value (a bug)
        """
        if column not in self._schema:
            raise ColumnNotFoundError(column)
        try:
            return self._data[column]
        except KeyError:
            raise MissingValueError(column) from None

    def set(self, column: str, value: Any) -> None:
        """Replace a column's value in place.

        Raises:
            ColumnNotFoundError: If the column is not in the schema
            TypeMismatchError: If the value does not fit the column type
        """
        column_type = self._schema.type_of(column)
        if not column_type.accepts(value):
            raise TypeMismatchError(column, column_type, value)
        self._data[column] = value

    def to_dict(self) -> dict[str, Any]:
        """Copy of the row's values, in schema column order."""
        return {column: self.get(column) for column in self._schema.names}

    def __getitem__(self, column: str) -> Any:
        return self.get(column)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c}={v!r}" for c, v in self._data.items())
        return f"Row({pairs})"
