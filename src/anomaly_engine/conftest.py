"""
Pytest configuration and shared fixtures for all engine tests.
"""

import pytest

from anomaly_engine.core.context import RunContext


# Sample batch/stream logs: user 2's only friend is
# user 1 (the 1-3 friendship is created and removed at the same instant),
# so user 2's 1601.83 purchase is judged against 16.83, 59.28 and 11.20.
BATCH_LOG_LINES = [
    '{"D":"3", "T":"50"}',
    '{"event_type":"purchase", "timestamp":"2017-06-13 11:33:01", "id": "1", "amount": "16.83"}',
    '{"event_type":"purchase", "timestamp":"2017-06-13 11:33:01", "id": "1", "amount": "59.28"}',
    '{"event_type":"befriend", "timestamp":"2017-06-13 11:33:01", "id1": "1", "id2": "2"}',
    '{"event_type":"befriend", "timestamp":"2017-06-13 11:33:01", "id1": "3", "id2": "1"}',
    '{"event_type":"purchase", "timestamp":"2017-06-13 11:33:01", "id": "1", "amount": "11.20"}',
    '{"event_type":"unfriend", "timestamp":"2017-06-13 11:33:01", "id1": "1", "id2": "3"}',
]

STREAM_LOG_LINES = [
    '{"event_type":"purchase", "timestamp":"2017-06-13 11:33:02", "id": "2", "amount": "1601.83"}',
]

EXPECTED_FLAGGED_LINE = (
    '{"event_type":"purchase", "timestamp":"2017-06-13 11:33:02", "id": "2", '
    '"amount": "1601.83", "mean": "29.10", "sd": "21.46"}'
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (reads/writes log files)"
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test (fast, isolated)"
    )


@pytest.fixture
def context():
    """Fresh run with D=2, T=50."""
    return RunContext.with_parameters(2, 50)


@pytest.fixture
def make_context():
    """Factory for runs with custom D/T."""
    return RunContext.with_parameters


@pytest.fixture
def batch_log(tmp_path):
    path = tmp_path / "log_input" / "batch_log.json"
    path.parent.mkdir(parents=True)
    path.write_text("\n".join(BATCH_LOG_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def stream_log(tmp_path):
    path = tmp_path / "log_input" / "stream_log.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(STREAM_LOG_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def batch_lines():
    return list(BATCH_LOG_LINES)


@pytest.fixture
def stream_lines():
    return list(STREAM_LOG_LINES)


@pytest.fixture
def expected_flagged_line():
    return EXPECTED_FLAGGED_LINE
