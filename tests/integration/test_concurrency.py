"""Concurrent mutation and observation of one table."""

from __future__ import annotations

import threading

import pytest

from memtable import ChangeKind, Database, OverflowPolicy, Schema, Table
from memtable.infrastructure.metrics import MetricsRegistry


@pytest.mark.integration
class TestConcurrentMutation:
    """Mutations from many threads are serialized by the table lock."""

    def test_parallel_adds_keep_every_row(
        self, people_schema: Schema, metrics_registry: MetricsRegistry
    ) -> None:
        table = Table(people_schema, name="people", metrics=metrics_registry)
        threads = [
            threading.Thread(
                target=lambda n=n: [
                    table.add({"name": f"writer-{n}", "age": i}) for i in range(200)
                ]
            )
            for n in range(8)
        ]

        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        rows = table.view()
        assert len(rows) == 8 * 200
        for n in range(8):
            ages = [r["age"] for r in rows if r["name"] == f"writer-{n}"]
            # per-writer insertion order is preserved
            assert ages == list(range(200))

    def test_snapshots_are_consistent_during_edits(
        self, people_schema: Schema, metrics_registry: MetricsRegistry
    ) -> None:
        """edit() holds the lock for the whole batch, so a snapshot never sees half of it."""
        table = Table(people_schema, name="people", metrics=metrics_registry)
        for i in range(100):
            table.add({"name": f"p{i}", "age": 0})

        stop = threading.Event()
        torn: list[set[int]] = []

        def reader() -> None:
            while not stop.is_set():
                ages = {r["age"] for r in table.view()}
                if len(ages) > 1:
                    torn.append(ages)

        readers = [threading.Thread(target=reader) for _ in range(2)]
        for t in readers:
            t.start()
        for generation in range(1, 50):
            table.edit(lambda r: True, {"age": generation})
        stop.set()
        for t in readers:
            t.join(timeout=10.0)

        assert torn == []

    def test_events_follow_mutation_order(
        self, people_schema: Schema, metrics_registry: MetricsRegistry
    ) -> None:
        table = Table(
            people_schema,
            name="people",
            buffer_size=10_000,
            overflow_policy=OverflowPolicy.DROP_NEWEST,
            metrics=metrics_registry,
        )
        changes = table.changes()

        def writer(n: int) -> None:
            for i in range(100):
                table.add({"name": f"writer-{n}", "age": i})

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        events = changes.drain()
        assert len(events) == 400
        assert all(e.kind is ChangeKind.ADDED for e in events)
        assert [e.values for e in events] == table.view()


@pytest.mark.integration
class TestObserverUnderLoad:
    """Observers keep up with, or converge to, the table."""

    def test_last_snapshot_matches_table(self, db: Database) -> None:
        people = db.get_table("people")
        observer = db.observe_table("people", buffer_size=4)

        def writer(n: int) -> None:
            for i in range(50):
                people.add({"name": f"writer-{n}", "age": i})
            people.remove(lambda r: r.get("name") == f"writer-{n}" and r.get("age") % 2 == 0)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        final = people.view()
        db.close()

        snapshots = list(observer)
        assert snapshots
        assert snapshots[-1] == final
        assert len(final) == 4 * 25
