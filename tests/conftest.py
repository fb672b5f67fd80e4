"""Shared test fixtures for all test modules."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from rrdbridge import CF, Creator, DSType, InMemoryEngine

# Fixed start time for schemas created in tests
START = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture
def engine() -> InMemoryEngine:
    """Provide an empty in-memory engine."""
    return InMemoryEngine()


@pytest.fixture
def rrd_path(tmp_path: Path) -> str:
    """Provide a path for a database file that does not exist yet."""
    return str(tmp_path / "test.rrd")


@pytest.fixture
def created_rrd(engine: InMemoryEngine, rrd_path: str) -> str:
    """Create a two data source database in the in-memory engine.

    Data sources are ``in`` and ``out`` (both COUNTER), one-minute step.
    """
    creator = Creator(engine, rrd_path, START, step=60)
    creator.data_source("in", DSType.COUNTER, 120, 0, "U")
    creator.data_source("out", DSType.COUNTER, 120, 0, "U")
    creator.archive(CF.AVERAGE, 0.5, 1, 1440)
    creator.create(overwrite=True)
    return rrd_path
