from __future__ import annotations

from kflow.application.ports.publisher import EventPublisher
from kflow.infrastructure.messaging.redis_connection import get_redis_client


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        client = get_redis_client(timeout_seconds=self._timeout_seconds)
        client.publish(channel, message)
