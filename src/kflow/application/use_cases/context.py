from __future__ import annotations

import logging
from dataclasses import dataclass

from kflow.application.mappers.event_envelope import events_channel
from kflow.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceContext:
    trace_id: str | None
    request_id: str | None


def publish_event(publisher: EventPublisher, topic: str, message: str) -> None:
    # State changes are already applied; a broker outage must not undo them.
    try:
        publisher.publish(channel=events_channel(topic), message=message)
    except Exception:
        logger.warning("event_publish_failed", extra={"topic": topic}, exc_info=True)


class EventOutbox:
    """Holds events raised under the restaurant lock until the lock is released."""

    def __init__(self, publisher: EventPublisher) -> None:
        self._publisher = publisher
        self._pending: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self._pending.append((channel, message))

    def flush(self) -> None:
        pending, self._pending = self._pending, []
        for channel, message in pending:
            try:
                self._publisher.publish(channel=channel, message=message)
            except Exception:
                logger.warning("event_publish_failed", extra={"channel": channel}, exc_info=True)
