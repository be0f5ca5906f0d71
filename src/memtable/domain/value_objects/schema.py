"""Table schema: an immutable, ordered set of typed columns."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from memtable.domain.errors import ColumnNotFoundError
from memtable.domain.value_objects.column_type import ColumnType


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed slot within a schema."""

    name: str
    type: ColumnType

    def __post_init__(self) -> None:
        """Validate the column definition."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Column name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.type, ColumnType):
            object.__setattr__(self, "type", ColumnType.parse(self.type))


@dataclass(frozen=True)
class Schema:
    """Immutable ordered column definition shared by a table and its rows.

    Example:
        >>> schema = Schema({"name": StringType, "age": NumberType})
        >>> schema.names
        ('name', 'age')
        >>> schema.type_of("age")
        <ColumnType.NUMBER: 'number'>
    """

    fields: tuple[Column, ...]

    def __init__(self, columns: Mapping[str, ColumnType | str] | Iterable[Column] = ()) -> None:
        if isinstance(columns, Mapping):
            fields = tuple(Column(name, ColumnType.parse(t)) for name, t in columns.items())
        else:
            fields = tuple(columns)

        seen: set[str] = set()
        for column in fields:
            if not isinstance(column, Column):
                raise ValueError(f"Schema fields must be Column instances, got {column!r}")
            if column.name in seen:
                raise ValueError(f"Duplicate column name: {column.name}")
            seen.add(column.name)

        object.__setattr__(self, "fields", fields)
        object.__setattr__(
            self, "_columns", MappingProxyType({c.name: c.type for c in fields})
        )

    @classmethod
    def of(cls, **columns: ColumnType | str) -> Schema:
        """Build a schema from keyword arguments, in argument order."""
        return cls(columns)

    @property
    def columns(self) -> Mapping[str, ColumnType]:
        """Read-only ordered mapping of column name to type."""
        return self._columns  # type: ignore[attr-defined]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.fields)

    def type_of(self, column: str) -> ColumnType:
        """Return a column's type.

        Raises:
            ColumnNotFoundError: If the column is not in the schema
        """
        try:
            return self.columns[column]
        except KeyError:
            raise ColumnNotFoundError(column) from None

    def __contains__(self, column: object) -> bool:
        return column in self.columns

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        cols = ", ".join(f"{c.name}: {c.type}" for c in self.fields)
        return f"Schema({cols})"
