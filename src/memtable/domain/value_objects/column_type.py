"""Column value kinds."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any


class ColumnType(Enum):
    """Closed set of value kinds a column can hold.

    NUMBER accepts int, float and Decimal. bool is rejected even though
    it subclasses int.
    """

    STRING = "string"
    """Textual values (str)."""

    NUMBER = "number"
    """Numeric values (int, float, Decimal)."""

    def accepts(self, value: Any) -> bool:
        """Check whether a value's runtime type matches this column type."""
        if self is ColumnType.STRING:
            return isinstance(value, str)
        if isinstance(value, bool):
            return False
        return isinstance(value, (int, float, Decimal))

    @classmethod
    def parse(cls, name: str | ColumnType) -> ColumnType:
        """Resolve a type name ("string", "NUMBER", ...) to a member."""
        if isinstance(name, ColumnType):
            return name
        try:
            return cls(name.lower())
        except (ValueError, AttributeError, TypeError) as e:
            raise ValueError(f"Unknown column type: {name!r}") from e

    def __str__(self) -> str:
        return self.value


StringType = ColumnType.STRING
NumberType = ColumnType.NUMBER
