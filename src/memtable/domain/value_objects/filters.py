"""Filter predicates.

A filter is one of a closed set of predicate variants, each carrying its
own typed parameters. Variants are callables over rows, so the same
object can drive ``Table.filter`` as well as ``Table.remove`` and
``Table.edit``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from memtable.domain.errors import InvalidFilterTypeError, TypeMismatchError
from memtable.domain.value_objects.column_type import ColumnType

if TYPE_CHECKING:
    from memtable.domain.entities.row import Row
    from memtable.domain.value_objects.schema import Schema


class FilterPredicate(ABC):
    """Base class for the filter predicate variants."""

    column: str

    @abstractmethod
    def validate(self, schema: Schema) -> None:
        """Check the predicate against a schema.

        Raises:
            ColumnNotFoundError: If the column is not in the schema
            TypeMismatchError: If the arguments do not fit the column type
        """
        ...

    @abstractmethod
    def matches(self, value: Any) -> bool:
        """Test a single column value."""
        ...

    def __call__(self, row: Row) -> bool:
        return self.matches(row.get(self.column))


@dataclass(frozen=True)
class EqualTo(FilterPredicate):
    """Rows whose column equals ``value``."""

    column: str
    value: Any

    def validate(self, schema: Schema) -> None:
        column_type = schema.type_of(self.column)
        if not column_type.accepts(self.value):
            raise TypeMismatchError(self.column, column_type, self.value)

    def matches(self, value: Any) -> bool:
        return value == self.value


@dataclass(frozen=True)
class Between(FilterPredicate):
    """Rows whose numeric column lies in ``[low, high]``, both ends inclusive."""

    column: str
    low: Any
    high: Any

    def validate(self, schema: Schema) -> None:
        column_type = schema.type_of(self.column)
        if column_type is not ColumnType.NUMBER:
            raise TypeMismatchError(self.column, ColumnType.NUMBER, column_type)
        for bound in (self.low, self.high):
            if not ColumnType.NUMBER.accepts(bound):
                raise TypeMismatchError(self.column, ColumnType.NUMBER, bound)

    def matches(self, value: Any) -> bool:
        return self.low <= value <= self.high


@dataclass(frozen=True)
class StartsWith(FilterPredicate):
    """Rows whose textual column starts with ``prefix``."""

    column: str
    prefix: str

    def validate(self, schema: Schema) -> None:
        column_type = schema.type_of(self.column)
        if column_type is not ColumnType.STRING:
            raise TypeMismatchError(self.column, ColumnType.STRING, column_type)
        if not isinstance(self.prefix, str):
            raise TypeMismatchError(self.column, ColumnType.STRING, self.prefix)

    def matches(self, value: Any) -> bool:
        return value.startswith(self.prefix)


_FILTER_KINDS: dict[str, Callable[..., FilterPredicate]] = {
    "equalTo": EqualTo,
    "between": Between,
    "startsWith": StartsWith,
}


def make_filter(kind: str, *args: Any) -> FilterPredicate:
    """Build a predicate variant from its kind name and positional arguments.

    Example:
        >>> make_filter("between", "age", 20, 30)
        Between(column='age', low=20, high=30)

    Raises:
        InvalidFilterTypeError: If ``kind`` is not a known filter kind
        TypeError: If the argument count does not fit the kind
    """
    try:
        factory = _FILTER_KINDS[kind]
    except (KeyError, TypeError):
        raise InvalidFilterTypeError(kind) from None
    return factory(*args)
