"""Pytest configuration and fixtures for memtable tests."""

from __future__ import annotations

from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from memtable import Database, NumberType, Schema, StringType, Table
from memtable.infrastructure.config import ChangeStreamConfig, Config, ObserveConfig
from memtable.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration with small buffers."""
    return Config(
        changes=ChangeStreamConfig(buffer_size=64),
        observe=ObserveConfig(snapshot_buffer_size=64, join_timeout_seconds=2.0),
    )


@pytest.fixture
def people_schema() -> Schema:
    """Provide the name/age schema used throughout the tests."""
    return Schema({"name": StringType, "age": NumberType})


@pytest.fixture
def people(people_schema: Schema, metrics_registry: MetricsRegistry) -> Table:
    """Provide an empty people table."""
    return Table(people_schema, name="people", metrics=metrics_registry)


@pytest.fixture
def db(
    test_config: Config, metrics_registry: MetricsRegistry, people_schema: Schema
) -> Generator[Database, None, None]:
    """Provide a database with an empty people table."""
    database = Database(config=test_config, metrics=metrics_registry)
    database.create_table("people", people_schema)
    yield database
    database.close()


@pytest.fixture
def metric_value(metrics_registry: MetricsRegistry) -> Callable[..., float]:
    """Read a sample from the test metrics registry (0.0 if absent)."""

    def read(name: str, **labels: str) -> float:
        value = metrics_registry._registry.get_sample_value(name, labels or None)
        return value or 0.0

    return read


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
