"""Unit tests for event sinks and the tracking service."""
import json
import logging
from unittest.mock import MagicMock, Mock, patch

import pytest
import redis

from timesaver.core.config import Settings
from timesaver.domain.events import AnalyticsRequest, LeadRequest
from timesaver.infrastructure.redis import RedisEventSink, get_redis_client
from timesaver.infrastructure.sinks import (
    InMemoryEventSink,
    LogEventSink,
    create_event_sink,
)
from timesaver.services.tracking import capture_lead, record_analytics_event


@pytest.fixture
def mock_redis_client():
    """Redis client whose pipeline records calls."""
    client = Mock()
    pipe = MagicMock()
    client.pipeline.return_value = pipe
    return client


class TestInMemoryEventSink:
    """Test InMemoryEventSink."""

    def test_records_by_kind(self):
        sink = InMemoryEventSink()
        sink.write("lead", {"email": "a@b.co"})
        sink.write("analytics", {"event": "x"})

        assert sink.records("lead") == [{"email": "a@b.co"}]
        assert sink.records("analytics") == [{"event": "x"}]
        assert sink.records("unknown") == []

    def test_caps_old_records(self):
        sink = InMemoryEventSink(max_records=2)
        for i in range(5):
            sink.write("analytics", {"n": i})

        assert [r["n"] for r in sink.records("analytics")] == [3, 4]

    def test_clear(self):
        sink = InMemoryEventSink()
        sink.write("lead", {"email": "a@b.co"})
        sink.clear()

        assert sink.records("lead") == []


class TestLogEventSink:
    """Test LogEventSink."""

    def test_lead_logged(self, caplog):
        sink = LogEventSink()
        with caplog.at_level(logging.INFO, logger="timesaver.events"):
            sink.write("lead", {"email": "a@b.co"})

        assert "New lead" in caplog.text
        assert caplog.records[-1].record == {"email": "a@b.co"}
        assert caplog.records[-1].record_kind == "lead"

    def test_analytics_logged(self, caplog):
        sink = LogEventSink()
        with caplog.at_level(logging.INFO, logger="timesaver.events"):
            sink.write("analytics", {"event": "cta_clicked"})

        assert "Analytics Event" in caplog.text


class TestRedisEventSink:
    """Test RedisEventSink with a mocked client."""

    def test_write_appends_and_trims(self, mock_redis_client):
        sink = RedisEventSink(mock_redis_client, max_length=100)
        sink.write("lead", {"email": "a@b.co"})

        pipe = mock_redis_client.pipeline.return_value
        pipe.rpush.assert_called_once_with("timesaver:events:lead", json.dumps({"email": "a@b.co"}))
        pipe.ltrim.assert_called_once_with("timesaver:events:lead", -100, -1)
        pipe.execute.assert_called_once()

    def test_write_failure_propagates(self, mock_redis_client):
        mock_redis_client.pipeline.return_value.execute.side_effect = redis.ConnectionError("gone")
        sink = RedisEventSink(mock_redis_client)

        with pytest.raises(redis.ConnectionError):
            sink.write("analytics", {"event": "x"})

    @patch("timesaver.infrastructure.redis.redis.Redis")
    def test_get_client_returns_none_when_unreachable(self, mock_redis_cls):
        mock_redis_cls.return_value.ping.side_effect = redis.ConnectionError("refused")

        assert get_redis_client(Settings()) is None


class TestCreateEventSink:
    """Test sink selection."""

    def test_memory_backend(self):
        assert isinstance(create_event_sink(Settings(), backend="memory"), InMemoryEventSink)

    def test_log_backend(self):
        assert isinstance(create_event_sink(Settings(), backend="log"), LogEventSink)

    @patch("timesaver.infrastructure.redis.get_redis_client")
    def test_redis_backend(self, mock_get_client, mock_redis_client):
        mock_get_client.return_value = mock_redis_client

        sink = create_event_sink(Settings(), backend="redis")
        assert isinstance(sink, RedisEventSink)

    @patch("timesaver.infrastructure.redis.get_redis_client")
    def test_redis_unavailable_falls_back_to_log(self, mock_get_client):
        mock_get_client.return_value = None

        assert isinstance(create_event_sink(Settings(), backend="redis"), LogEventSink)

    def test_unknown_backend_falls_back_to_log(self):
        assert isinstance(create_event_sink(Settings(), backend="kafka"), LogEventSink)


class TestTracking:
    """Test record_analytics_event and capture_lead."""

    def test_analytics_record(self):
        sink = InMemoryEventSink()
        record = record_analytics_event(
            sink,
            AnalyticsRequest(event=" cta_clicked\n", properties={"hours": 4}),
            ip="10.0.0.1",
            user_agent="Mozilla/5.0",
        )

        assert record.event == "cta_clicked"
        assert sink.records("analytics")[0]["properties"] == {"hours": 4}
        assert sink.records("analytics")[0]["ip"] == "10.0.0.1"

    def test_lead_record_cleans_text(self):
        sink = InMemoryEventSink()
        capture_lead(
            sink,
            LeadRequest(email=" ops@acme.example ", company="Acme\n  Corp", calculatedHours=9),
        )

        lead = sink.records("lead")[0]
        assert lead["email"] == "ops@acme.example"
        assert lead["company"] == "Acme Corp"
        assert lead["calculated_hours"] == 9
        assert lead["ip"] is None
