from __future__ import annotations

from kflow.application.dto.requests import OrderLineRequest, PreOrderLineRequest
from kflow.application.dto.responses import ReservationResponse
from kflow.application.mappers.reservation_mapper import to_reservation_response
from kflow.application.ports.publisher import EventPublisher
from kflow.application.ports.repositories import InventoryRepository, ReservationRepository
from kflow.application.use_cases.context import TraceContext
from kflow.application.use_cases.open_order import resolve_line
from kflow.application.use_cases.update_reservation import ReservationCommand
from kflow.domain.common.ids import OrderLineId, ReservationId
from kflow.domain.order.aggregator import add_line, remove_line
from kflow.domain.reservation.entities import Reservation, ReservationTransitionError


def _editable(reservation: Reservation) -> Reservation:
    if reservation.is_terminal:
        raise ReservationTransitionError(
            f"reservation {reservation.reservation_id} is {reservation.status.value}; "
            "its pre-order is closed",
            details={"status": reservation.status.value},
        )
    return reservation


class AddPreOrderLine(ReservationCommand):
    def __init__(
        self,
        reservation_repository: ReservationRepository,
        inventory_repository: InventoryRepository,
        publisher: EventPublisher,
    ) -> None:
        super().__init__(reservation_repository=reservation_repository, publisher=publisher)
        self._inventory_repository = inventory_repository

    def execute(
        self,
        reservation_id: ReservationId,
        request_dto: PreOrderLineRequest,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        reservation = _editable(self._get(reservation_id))
        line = resolve_line(
            self._inventory_repository,
            OrderLineRequest(item_id=request_dto.item_id, quantity=request_dto.quantity),
        )
        updated = reservation.with_pre_order(add_line(reservation.pre_order, line))
        return self._store(reservation, updated, trace_ctx)


class RemovePreOrderLine(ReservationCommand):
    def execute(
        self,
        reservation_id: ReservationId,
        line_id: OrderLineId,
        trace_ctx: TraceContext,
    ) -> ReservationResponse:
        reservation = _editable(self._get(reservation_id))
        if all(line.line_id != line_id for line in reservation.pre_order):
            return to_reservation_response(reservation)
        updated = reservation.with_pre_order(remove_line(reservation.pre_order, line_id))
        return self._store(reservation, updated, trace_ctx)
