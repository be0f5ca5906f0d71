"""
memtable - typed, embeddable in-memory tabular store

Named tables with a fixed column schema, row-level CRUD, predicate-based
filtering, and a live change-notification stream per table.
"""

__version__ = "0.1.0"

from memtable.application import Database, TableObserver
from memtable.domain.entities import ChangeEvent, ChangeKind, Row, Table
from memtable.domain.errors import (
    ColumnNotFoundError,
    InvalidFilterTypeError,
    MemtableError,
    MissingValueError,
    SchemaMismatchError,
    SubscriptionClosedError,
    TableNotFoundError,
    TypeMismatchError,
)
from memtable.domain.services import ChangeSubscription
from memtable.domain.value_objects import (
    Between,
    Column,
    ColumnType,
    EqualTo,
    NumberType,
    OverflowPolicy,
    Schema,
    StartsWith,
    StringType,
    make_filter,
)
from memtable.infrastructure import Config, Observability, configure

__all__ = [
    "__version__",
    # Setup
    "Config",
    "configure",
    "Observability",
    # Application
    "Database",
    "TableObserver",
    # Entities
    "Row",
    "Table",
    "ChangeEvent",
    "ChangeKind",
    "ChangeSubscription",
    # Value objects
    "Column",
    "ColumnType",
    "StringType",
    "NumberType",
    "Schema",
    "OverflowPolicy",
    "EqualTo",
    "Between",
    "StartsWith",
    "make_filter",
    # Errors
    "MemtableError",
    "SchemaMismatchError",
    "ColumnNotFoundError",
    "TypeMismatchError",
    "TableNotFoundError",
    "InvalidFilterTypeError",
    "MissingValueError",
    "SubscriptionClosedError",
]
