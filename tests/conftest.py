"""Pytest configuration and shared fixtures."""
import os

os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("EVENT_SINK", "memory")

import pytest
from fastapi.testclient import TestClient

from timesaver.infrastructure.sinks import InMemoryEventSink


@pytest.fixture
def valid_usage():
    """A calculation payload inside every server bound."""
    return {
        "emailsPerWeek": 200,
        "dataEntry": 10,
        "followUps": 50,
        "reporting": 5,
    }


@pytest.fixture
def app():
    """The FastAPI application."""
    # Import after the environment is set up
    from main import app
    return app


@pytest.fixture
def test_client(app):
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def memory_sink(app):
    """Auto-swap the event sink for an in-memory one so records can be inspected."""
    original = app.state.event_sink
    sink = InMemoryEventSink()
    app.state.event_sink = sink
    yield sink
    app.state.event_sink = original


@pytest.fixture(autouse=True)
def reset_rate_limiter(app):
    """Start every test with empty rate limit windows."""
    limiter = app.state.rate_limiter
    if limiter is not None:
        limiter.reset()
    yield
    app.state.rate_limiter = limiter
