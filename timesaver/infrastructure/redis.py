"""Redis-backed event sink.

Each record kind is appended to its own capped list (``timesaver:events:lead``,
``timesaver:events:analytics``) so downstream jobs can drain them.

For a managed Redis instance:
- Set REDIS_HOST to the instance address
- Set REDIS_PASSWORD if authentication is enabled
"""
import json
import redis
from typing import Any, Dict, Optional

from timesaver.core.config import Settings
from timesaver.core.logging import get_logger
from timesaver.infrastructure.sinks import EventSink

logger = get_logger(__name__)


def get_redis_client(config: Settings, decode_responses: bool = True) -> Optional[redis.Redis]:
    """Create a pooled Redis client from settings.

    Returns None if Redis is not reachable (graceful fallback).

    Args:
        config: Application settings holding REDIS_* values
        decode_responses: Whether to decode responses to strings

    Returns:
        Redis client instance or None if unavailable
    """
    logger.info(f"Initializing Redis connection pool: {config.redis_host}:{config.redis_port}")

    try:
        pool = redis.ConnectionPool(
            host=config.redis_host,
            port=config.redis_port,
            db=config.redis_db,
            password=config.redis_password,
            decode_responses=decode_responses,
            max_connections=20,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        client = redis.Redis(connection_pool=pool)
        client.ping()
        logger.info("Redis connection established successfully")
        return client

    except redis.ConnectionError as e:
        logger.error(f"Failed to connect to Redis: {e}")
        return None
    except redis.RedisError as e:
        logger.error(f"Redis initialization error: {e}", exc_info=True)
        return None


class RedisEventSink(EventSink):
    """Append records to capped Redis lists.

    Example:
        >>> sink = RedisEventSink(client, max_length=10000)
        >>> sink.write("lead", {"email": "ops@acme.example"})
    """

    name = "redis"

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "timesaver:events:",
        max_length: int = 10000
    ):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.max_length = max_length

        logger.info(f"RedisEventSink initialized (cap {max_length} records per kind)")

    def _make_key(self, kind: str) -> str:
        """Create full Redis key with prefix."""
        return f"{self.key_prefix}{kind}"

    def write(self, kind: str, record: Dict[str, Any]) -> None:
        key = self._make_key(kind)
        serialized = json.dumps(record, default=str)

        pipe = self.redis.pipeline()
        pipe.rpush(key, serialized)
        pipe.ltrim(key, -self.max_length, -1)
        pipe.execute()

        logger.debug(f"Record appended to {key}")

    def close(self) -> None:
        self.redis.close()
