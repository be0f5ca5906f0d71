"""Table entity: ordered rows sharing one schema, with change broadcast.

Concurrency:
    Each table owns one re-entrant lock. Every public operation holds it
    for its full duration, so mutations from different threads are
    serialized and a snapshot always reflects a whole number of completed
    mutations. Change events are published while the lock is held, which
    keeps per-table event order equal to mutation order; publishing never
    blocks (see ChangeChannel), so slow subscribers cannot stall writers.

Batch semantics:
    ``remove`` and ``edit`` are not atomic across the rows they touch. If
    a predicate or a ``set`` raises midway, rows already processed in that
    call stay removed or edited and their events stay published. A row
    partially edited before a failing ``set`` is announced as well.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Mapping

from memtable.domain.entities.change import ChangeEvent, ChangeKind
from memtable.domain.entities.row import Row
from memtable.domain.errors import InvalidFilterTypeError
from memtable.domain.services import ChangeChannel, ChangeSubscription
from memtable.domain.value_objects import FilterPredicate, OverflowPolicy, Schema
from memtable.infrastructure.logging import get_logger
from memtable.infrastructure.metrics import MetricsRegistry, get_metrics
from memtable.infrastructure.tracing import trace_span

logger = get_logger(__name__)

RowPredicate = Callable[[Row], bool]
Snapshot = list[dict[str, Any]]


class Table:
    """An ordered, mutable collection of rows with change notification.

    Example:
        >>> people = Table(Schema({"name": StringType, "age": NumberType}), name="people")
        >>> people.add({"name": "Alice", "age": 30})
        Row(name='Alice', age=30)
        >>> people.edit(lambda r: r.get("age") == 30, {"age": 31}).view()
        [{'name': 'Alice', 'age': 31}]
    """

    def __init__(
        self,
        schema: Schema,
        *,
        name: str = "table",
        buffer_size: int = 64,
        overflow_policy: OverflowPolicy = OverflowPolicy.DROP_NEWEST,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize an empty table.

        Args:
            schema: Schema every row is validated against
            name: Name used in logs and metrics
            buffer_size: Capacity of each change subscriber's buffer
            overflow_policy: What a full subscriber buffer does with new events
            metrics: Metrics registry (defaults to the global one)
        """
        self._schema = schema
        self._name = name
        self._rows: list[Row] = []
        self._lock = threading.RLock()
        self._channel: ChangeChannel[ChangeEvent] = ChangeChannel(buffer_size, overflow_policy)
        self._metrics = metrics or get_metrics()

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def buffer_size(self) -> int:
        return self._channel.buffer_size

    @property
    def overflow_policy(self) -> OverflowPolicy:
        return self._channel.overflow_policy

    def add(self, values: Mapping[str, Any]) -> Row:
        """Append a new row built from ``values`` and announce it.

        Raises:
            SchemaMismatchError: If the keys differ from the schema's
            TypeMismatchError: If a value does not fit its column type
        """
        row = Row(self._schema, values)
        with self._lock:
            self._rows.append(row)
            self._metrics.rows_mutated_total.labels(table=self._name, operation="add").inc()
            self._emit(ChangeKind.ADDED, row)
        return row

    def remove(self, predicate: RowPredicate) -> Table:
        """Remove every row matching ``predicate``, one event per removed row."""
        with self._lock:
            i = 0
            while i < len(self._rows):
                row = self._rows[i]
                if predicate(row):
                    del self._rows[i]
                    self._metrics.rows_mutated_total.labels(
                        table=self._name, operation="remove"
                    ).inc()
                    self._emit(ChangeKind.REMOVED, row)
                else:
                    i += 1
        return self

    def edit(self, predicate: RowPredicate, changes: Mapping[str, Any]) -> Table:
        """Apply ``changes`` to every row matching ``predicate``.

        Each edited row is announced once, however many columns changed.
        A row whose later column fails after an earlier one was set keeps
        the earlier value and is announced before the error propagates.

        Raises:
            ColumnNotFoundError: If a changed column is not in the schema
            TypeMismatchError: If a new value does not fit its column type
        """
        with self._lock:
            matched = [row for row in self._rows if predicate(row)]
            for row in matched:
                touched = False
                try:
                    for column, value in changes.items():
                        row.set(column, value)
                        touched = True
                finally:
                    # A row left half-edited by a failing set is still announced
                    if touched:
                        self._metrics.rows_mutated_total.labels(
                            table=self._name, operation="edit"
                        ).inc()
                        self._emit(ChangeKind.EDITED, row)
        return self

    def view(self) -> Snapshot:
        """Independent snapshot of the rows' values, in table order."""
        with self._lock:
            return [row.to_dict() for row in self._rows]

    def filter(self, predicate: FilterPredicate) -> Table:
        """Copy the rows matching a filter predicate into a new table.

        The new table shares this table's schema and change settings but
        nothing else: mutating either never affects the other. It is named
        after the source and the filter, e.g. ``people[Between]``, so its
        metrics never count against the source table.

        Raises:
            InvalidFilterTypeError: If ``predicate`` is not a filter variant
            ColumnNotFoundError: If the filtered column is not in the schema
            TypeMismatchError: If the filter arguments do not fit the column
        """
        if not isinstance(predicate, FilterPredicate):
            raise InvalidFilterTypeError(type(predicate).__name__)

        with trace_span(
            "memtable.filter",
            {"memtable.table": self._name, "memtable.filter": type(predicate).__name__},
        ):
            start = time.perf_counter()
            predicate.validate(self._schema)
            result = Table(
                self._schema,
                name=f"{self._name}[{type(predicate).__name__}]",
                buffer_size=self.buffer_size,
                overflow_policy=self.overflow_policy,
                metrics=self._metrics,
            )
            with self._lock:
                for row in self._rows:
                    if predicate(row):
                        result.add(row.to_dict())
            self._metrics.filter_latency_seconds.labels(table=self._name).observe(
                time.perf_counter() - start
            )
        return result

    def changes(
        self,
        buffer_size: int | None = None,
        overflow_policy: OverflowPolicy | None = None,
    ) -> ChangeSubscription[ChangeEvent]:
        """Subscribe to this table's change events.

        Every call creates an independent subscription that sees the
        events emitted after it was created. Close it when done.

        Args:
            buffer_size: Buffer capacity (table default if None)
            overflow_policy: Overflow policy (table default if None)
        """
        return self._channel.subscribe(buffer_size, overflow_policy)

    def subscribe_with_snapshot(
        self,
        buffer_size: int | None = None,
        overflow_policy: OverflowPolicy | None = None,
    ) -> tuple[ChangeSubscription[ChangeEvent], Snapshot]:
        """Subscribe and take a snapshot atomically.

        No mutation can slip in between the two, so the snapshot plus the
        subscription's events account for every change.
        """
        with self._lock:
            return self._channel.subscribe(buffer_size, overflow_policy), self.view()

    def close(self) -> None:
        """Send the terminal signal to every change subscriber.

        The table stays usable; later subscriptions start out closed.
        """
        self._channel.close()
        logger.debug("table_channel_closed", table=self._name)

    @property
    def subscriber_count(self) -> int:
        return self._channel.subscriber_count

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __repr__(self) -> str:
        return f"Table(name={self._name!r}, rows={len(self)}, schema={self._schema!r})"

    def _emit(self, kind: ChangeKind, row: Row) -> None:
        event = ChangeEvent(kind=kind, row=row, values=row.to_dict())
        dropped = self._channel.publish(event)
        self._metrics.change_events_published_total.labels(table=self._name).inc()
        logger.debug("row_changed", table=self._name, kind=kind.value)
        if dropped:
            self._metrics.change_events_dropped_total.labels(table=self._name).inc(dropped)
            logger.warning(
                "change_events_dropped",
                table=self._name,
                dropped=dropped,
                policy=self.overflow_policy.value,
            )
