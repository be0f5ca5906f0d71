"""Database: registry of named tables.

The database owns its tables, hands them out by name, and creates
observers for them. It adds no semantics of its own to table operations;
callers mutate tables directly.

Usage:
    from memtable import Database, Schema, StringType, NumberType

    with Database() as db:
        db.create_table("people", Schema({"name": StringType, "age": NumberType}))
        people = db.get_table("people")
        people.add({"name": "Alice", "age": 30})

        with db.observe_table("people") as observer:
            for snapshot in observer:
                ...
"""

from __future__ import annotations

import threading
import weakref

from memtable.application.observer import TableObserver
from memtable.domain.entities import Table
from memtable.domain.errors import TableNotFoundError
from memtable.domain.value_objects import OverflowPolicy, Schema
from memtable.infrastructure.config import Config, get_config
from memtable.infrastructure.logging import get_logger
from memtable.infrastructure.metrics import MetricsRegistry, get_metrics
from memtable.infrastructure.tracing import trace_span

logger = get_logger(__name__)


class Database:
    """Registry mapping table name to Table.

    Closing:
        ``close()`` sends the terminal signal to every live observer and
        raw change subscription of the registered tables, then clears the
        registry. Observers drain what they already buffered and end. The
        database itself stays usable: new tables may be created afterwards.

    Replacing:
        ``create_table`` with an existing name replaces the table; the old
        table's subscribers get the same terminal signal as on ``close()``.

    Thread Safety:
        Registry operations are serialized by one lock. Table operations
        use the table's own lock.
    """

    def __init__(
        self,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize an empty database.

        Args:
            config: Configuration (defaults to the global one)
            metrics: Metrics registry (defaults to the global one)
        """
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._lock = threading.Lock()
        self._tables: dict[str, Table] = {}
        self._observers: weakref.WeakSet[TableObserver] = weakref.WeakSet()

    @property
    def config(self) -> Config:
        return self._config

    def create_table(
        self,
        name: str,
        schema: Schema,
        *,
        buffer_size: int | None = None,
        overflow_policy: OverflowPolicy | None = None,
    ) -> Database:
        """Register a new empty table under ``name``, replacing any existing one.

        Args:
            name: Table name
            schema: Column definition of the table
            buffer_size: Per-subscriber change buffer (config default if None)
            overflow_policy: Change buffer overflow policy (config default if None)

        Returns:
            This database, for chaining.
        """
        if buffer_size is None:
            buffer_size = self._config.changes.buffer_size
        if overflow_policy is None:
            overflow_policy = self._config.changes.overflow_policy
        table = Table(
            schema,
            name=name,
            buffer_size=buffer_size,
            overflow_policy=overflow_policy,
            metrics=self._metrics,
        )
        with self._lock:
            replaced = self._tables.get(name)
            self._tables[name] = table

        if replaced is not None:
            replaced.close()
            logger.info("table_replaced", table=name, columns=list(schema.names))
        else:
            self._metrics.tables.inc()
            logger.info("table_created", table=name, columns=list(schema.names))
        return self

    def get_table(self, name: str) -> Table:
        """Get a registered table.

        Raises:
            TableNotFoundError: If no table is registered under ``name``
        """
        with self._lock:
            try:
                return self._tables[name]
            except KeyError:
                raise TableNotFoundError(name) from None

    def has_table(self, name: str) -> bool:
        with self._lock:
            return name in self._tables

    def table_names(self) -> list[str]:
        """Names of the registered tables, in creation order."""
        with self._lock:
            return list(self._tables)

    def observe_table(self, name: str, *, buffer_size: int | None = None) -> TableObserver:
        """Observe a table: its current snapshot, then one after every change.

        Args:
            name: Table name
            buffer_size: Snapshots buffered per observer (config default if None)

        Returns:
            A running TableObserver. Close it when done.

        Raises:
            TableNotFoundError: If no table is registered under ``name``
        """
        with trace_span("memtable.observe_table", {"memtable.table": name}):
            table = self.get_table(name)
            if buffer_size is None:
                buffer_size = self._config.observe.snapshot_buffer_size
            observer = TableObserver(
                table,
                buffer_size=buffer_size,
                join_timeout=self._config.observe.join_timeout_seconds,
                metrics=self._metrics,
            )
        self._observers.add(observer)
        return observer

    def close(self) -> None:
        """Terminate every subscription and clear the registry."""
        with self._lock:
            tables, self._tables = self._tables, {}
        for table in tables.values():
            table.close()
        for observer in list(self._observers):
            observer.join(self._config.observe.join_timeout_seconds)
        self._metrics.tables.dec(len(tables))
        logger.info("database_closed", tables=len(tables))

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
