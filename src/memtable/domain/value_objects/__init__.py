"""Value objects for the memtable domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Column types:
        - ColumnType: Closed set of column value kinds (STRING, NUMBER)
        - StringType, NumberType: Aliases for the members

    Schema:
        - Column: A named, typed slot
        - Schema: Immutable ordered column definition of a table

    Filters:
        - FilterPredicate: Base of the closed predicate variants
        - EqualTo, Between, StartsWith: The predicate variants
        - make_filter: Build a variant from its kind name

    Broadcast:
        - OverflowPolicy: What a full subscriber buffer does with new items
"""

from memtable.domain.value_objects.column_type import (
    ColumnType,
    NumberType,
    StringType,
)
from memtable.domain.value_objects.filters import (
    Between,
    EqualTo,
    FilterPredicate,
    StartsWith,
    make_filter,
)
from memtable.domain.value_objects.overflow import OverflowPolicy
from memtable.domain.value_objects.schema import Column, Schema

__all__ = [
    # Column types
    "ColumnType",
    "StringType",
    "NumberType",
    # Schema
    "Column",
    "Schema",
    # Filters
    "FilterPredicate",
    "EqualTo",
    "Between",
    "StartsWith",
    "make_filter",
    # Broadcast
    "OverflowPolicy",
]
