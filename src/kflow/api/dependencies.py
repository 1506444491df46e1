from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request

from kflow.api.middleware.request_id import get_request_id
from kflow.application.ports.publisher import EventPublisher
from kflow.application.use_cases.context import EventOutbox, TraceContext
from kflow.infrastructure.memory.state import RestaurantState
from kflow.infrastructure.observability.otel import current_trace_id


def restaurant_state(request: Request) -> RestaurantState:
    return request.app.state.restaurant


def event_publisher(request: Request) -> EventPublisher:
    return request.app.state.publisher


def trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


@contextmanager
def state_mutation(request: Request) -> Iterator[EventOutbox]:
    """Run a mutation under the restaurant lock and publish its events after release."""
    state = restaurant_state(request)
    outbox = EventOutbox(event_publisher(request))
    with state.lock:
        yield outbox
    outbox.flush()
