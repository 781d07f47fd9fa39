"""Central test fixtures."""

import pytest

from sieve.config import SieveSettings
from sieve.context import clear_context
from sieve.testing import RecordingEngine, RecordingQuery


@pytest.fixture
def recording_query() -> RecordingQuery:
    """Create an engine-query handle with three canned results."""
    return RecordingQuery(results=["r1", "r2", "r3"])


@pytest.fixture
def engine(recording_query: RecordingQuery) -> RecordingEngine:
    """Create an engine whose services hand out the recording query."""
    return RecordingEngine(recording_query)


@pytest.fixture
def settings() -> SieveSettings:
    """Create settings with framework defaults, ignoring the environment."""
    return SieveSettings(_env_prefix="SIEVE_TEST_UNUSED_")


@pytest.fixture(autouse=True)
def clear_execution_context():
    """Clear execution context before and after each test."""
    clear_context()
    yield
    clear_context()
