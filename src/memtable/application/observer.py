"""Table observer: live whole-table snapshots backed by a worker thread.

An observer yields the table's snapshot at subscription time, then a
fresh snapshot after every change event the table emits. Per-row deltas
are never delivered; consumers always see complete tables.

Lifecycle:
    - ``close()`` stops the worker and releases the change subscription.
    - Closing the table's channel (``Table.close``, ``Database.close`` or
      replacing the table) ends the worker; snapshots already buffered
      stay readable, then iteration ends.
    - An observer garbage-collected without ``close()`` is finalized the
      same way, so no worker outlives its observer.
"""

from __future__ import annotations

import threading
import weakref
from typing import Iterator

from memtable.domain.entities import ChangeEvent, Table
from memtable.domain.services import BoundedBuffer, ChangeSubscription
from memtable.domain.value_objects import OverflowPolicy
from memtable.infrastructure.logging import get_logger
from memtable.infrastructure.metrics import MetricsRegistry, get_metrics

logger = get_logger(__name__)

Snapshot = list[dict]


class TableObserver:
    """Cancellable stream of snapshots of one table.

    Snapshots are buffered with DROP_OLDEST: a slow reader loses stale
    snapshots, never the most recent one.

    Example:
        with db.observe_table("people") as observer:
            initial = observer.get()
            db.get_table("people").add({"name": "Bob", "age": 25})
            latest = observer.get(timeout=1.0)
    """

    def __init__(
        self,
        table: Table,
        *,
        buffer_size: int = 16,
        join_timeout: float = 1.0,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Subscribe to ``table`` and start the republishing worker.

        The initial snapshot is buffered before this returns.

        Args:
            table: Table to observe
            buffer_size: Snapshots buffered before the oldest is dropped
            join_timeout: Max seconds ``close()`` waits for the worker
            metrics: Metrics registry (defaults to the global one)
        """
        metrics = metrics or get_metrics()
        self._table_name = table.name
        self._join_timeout = join_timeout
        self._snapshots: BoundedBuffer[Snapshot] = BoundedBuffer(
            buffer_size, OverflowPolicy.DROP_OLDEST
        )

        # Any event triggers a full snapshot, so only the newest one matters
        changes, initial = table.subscribe_with_snapshot(
            overflow_policy=OverflowPolicy.DROP_OLDEST
        )
        self._snapshots.put(initial)

        self._worker = threading.Thread(
            target=_republish,
            args=(table, changes, self._snapshots, metrics),
            name=f"memtable-observer-{table.name}",
            daemon=True,
        )
        # Must not reference self, or the observer could never be collected
        self._finalizer = weakref.finalize(self, _release, changes, self._snapshots)

        metrics.observers_active.inc()
        self._worker.start()
        logger.info("observer_started", table=table.name)

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def closed(self) -> bool:
        """True once no further snapshots will be produced."""
        return self._snapshots.closed

    @property
    def dropped(self) -> int:
        """Snapshots lost because the reader fell behind."""
        return self._snapshots.dropped

    def get(self, timeout: float | None = None) -> Snapshot | None:
        """Take the next snapshot, waiting up to ``timeout`` seconds.

        Returns:
            The next snapshot, or None if the timeout expired first.

        Raises:
            SubscriptionClosedError: If the observer is closed and drained.
        """
        return self._snapshots.get(timeout)

    def latest(self) -> Snapshot | None:
        """Take the most recent buffered snapshot, discarding older ones."""
        pending = self._snapshots.drain()
        return pending[-1] if pending else None

    def close(self) -> None:
        """Stop the worker, release the subscription, discard pending snapshots.

        Idempotent. Does not affect the table or other observers.
        """
        self._finalizer()
        self._snapshots.drain()
        self.join(self._join_timeout)

    def join(self, timeout: float | None = None) -> None:
        """Wait for the worker thread to exit."""
        if self._worker is not threading.current_thread():
            self._worker.join(timeout)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __enter__(self) -> TableObserver:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"TableObserver(table={self._table_name!r}, {state})"


def _republish(
    table: Table,
    changes: ChangeSubscription[ChangeEvent],
    snapshots: BoundedBuffer[Snapshot],
    metrics: MetricsRegistry,
) -> None:
    """Worker loop: one fresh snapshot per change event until the stream ends."""
    try:
        for _event in changes:
            if snapshots.closed:
                break
            snapshots.put(table.view())
            metrics.snapshots_published_total.labels(table=table.name).inc()
    finally:
        changes.close()
        snapshots.close()
        metrics.observers_active.dec()
        logger.info("observer_stopped", table=table.name)


def _release(
    changes: ChangeSubscription[ChangeEvent],
    snapshots: BoundedBuffer[Snapshot],
) -> None:
    changes.close()
    snapshots.close()
