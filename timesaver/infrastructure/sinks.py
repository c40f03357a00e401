"""Event sinks for analytics events and captured leads.

Records are write-only from the application's point of view: the API appends
them and never reads them back. Pick a backend with ``EVENT_SINK``:

- ``log``: one structured log line per record (default)
- ``memory``: kept in a list on the sink instance, used by tests and demos
- ``redis``: appended to a capped Redis list per record kind
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from timesaver.core.config import Settings
from timesaver.core.logging import get_logger

logger = get_logger(__name__)

ANALYTICS = "analytics"
LEADS = "lead"


class EventSink(ABC):
    """Destination for analytics and lead records."""

    name = "abstract"

    @abstractmethod
    def write(self, kind: str, record: Dict[str, Any]) -> None:
        """Append a record. Implementations raise on failure."""

    def close(self) -> None:
        """Release backend resources, if any."""


class LogEventSink(EventSink):
    """Write every record as a log line on the ``timesaver.events`` logger."""

    name = "log"

    def __init__(self, logger_name: str = "timesaver.events"):
        self.logger = get_logger(logger_name)

    def write(self, kind: str, record: Dict[str, Any]) -> None:
        label = "Analytics Event" if kind == ANALYTICS else "New lead"
        self.logger.info(f"{label}: {record}", extra={"record_kind": kind, "record": record})


class InMemoryEventSink(EventSink):
    """Keep records in memory, newest last.

    Example:
        >>> sink = InMemoryEventSink()
        >>> sink.write("lead", {"email": "a@b.co"})
        >>> sink.records("lead")
        [{'email': 'a@b.co'}]
    """

    name = "memory"

    def __init__(self, max_records: int = 1000):
        self.max_records = max_records
        self._records: Dict[str, List[Dict[str, Any]]] = {}

    def write(self, kind: str, record: Dict[str, Any]) -> None:
        bucket = self._records.setdefault(kind, [])
        bucket.append(dict(record))
        if len(bucket) > self.max_records:
            del bucket[: len(bucket) - self.max_records]

    def records(self, kind: str) -> List[Dict[str, Any]]:
        return list(self._records.get(kind, []))

    def clear(self) -> None:
        self._records.clear()


def create_event_sink(config: Settings, backend: Optional[str] = None) -> EventSink:
    """Build the sink selected by configuration.

    Falls back to the log sink when Redis is selected but unreachable.
    """
    backend = backend or config.event_sink

    if backend == "memory":
        return InMemoryEventSink()

    if backend == "redis":
        from timesaver.infrastructure.redis import RedisEventSink, get_redis_client

        client = get_redis_client(config)
        if client is not None:
            return RedisEventSink(client)
        logger.warning("Redis unavailable, falling back to log event sink")

    elif backend != "log":
        logger.warning(f"Unknown event sink '{backend}', using log sink")

    return LogEventSink()
