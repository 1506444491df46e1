from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from redis import asyncio as redis_asyncio

from kflow.infrastructure.messaging.redis_connection import get_async_redis_client

logger = logging.getLogger(__name__)

EVENTS_PATTERN = "events:*"


def _decode_value(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def topic_from_channel(channel: str) -> str | None:
    prefix, _, topic = channel.partition(":")
    if prefix != "events" or not topic:
        return None
    return topic


async def _close(resource: Any) -> None:
    aclose = getattr(resource, "aclose", None)
    if callable(aclose):
        await aclose()
    else:
        await resource.close()


async def run_event_fanout(app_state: Any) -> None:
    """Relay every published event to the WebSocket subscribers of its topic."""
    if not os.getenv("REDIS_URL"):
        logger.warning("event_fanout_not_started", extra={"reason": "REDIS_URL missing"})
        return

    backoff_seconds = 1.0
    while True:
        client: redis_asyncio.Redis | None = None
        pubsub: redis_asyncio.client.PubSub | None = None
        try:
            client = get_async_redis_client()
            pubsub = client.pubsub()
            await pubsub.psubscribe(EVENTS_PATTERN)
            logger.info("event_fanout_subscribed", extra={"pattern": EVENTS_PATTERN})
            backoff_seconds = 1.0

            while True:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if message is None:
                    await asyncio.sleep(0.05)
                    continue

                channel = _decode_value(message.get("channel"))
                payload = _decode_value(message.get("data"))
                if not channel or not payload:
                    continue

                topic = topic_from_channel(channel)
                if topic is None:
                    logger.warning("event_fanout_invalid_channel", extra={"channel": channel})
                    continue

                await app_state.ws_manager.broadcast(topic=topic, message_json_str=payload)
        except asyncio.CancelledError:
            logger.info("event_fanout_cancelled")
            raise
        except Exception:
            logger.exception("event_fanout_error", extra={"backoff_seconds": backoff_seconds})
            await asyncio.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, 5.0)
        finally:
            if pubsub is not None:
                await _close(pubsub)
            if client is not None:
                await _close(client)
