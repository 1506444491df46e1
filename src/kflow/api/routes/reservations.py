from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from kflow.api.dependencies import restaurant_state, state_mutation, trace_context
from kflow.application.dto.requests import (
    CreateReservationRequest,
    PreOrderLineRequest,
    UpdateReservationRequest,
)
from kflow.application.dto.responses import ReservationListResponse, ReservationResponse
from kflow.application.use_cases.create_reservation import CreateReservation
from kflow.application.use_cases.delete_reservation import DeleteReservation
from kflow.application.use_cases.list_reservations import GetReservation, ListReservations
from kflow.application.use_cases.pre_order import AddPreOrderLine, RemovePreOrderLine
from kflow.application.use_cases.update_reservation import CancelReservation, UpdateReservation
from kflow.domain.common.ids import OrderLineId, ReservationId

router = APIRouter(prefix="/api/reservas", tags=["reservas"])


@router.get("", response_model=ReservationListResponse)
def list_reservations(request: Request, estado: str | None = None) -> ReservationListResponse:
    state = restaurant_state(request)
    with state.lock:
        return ListReservations(reservation_repository=state.reservations).execute(status=estado)


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    request_dto: CreateReservationRequest,
    request: Request,
) -> ReservationResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = CreateReservation(reservation_repository=state.reservations, publisher=outbox)
        return use_case.execute(request_dto=request_dto, trace_ctx=trace_context())


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: str, request: Request) -> ReservationResponse:
    state = restaurant_state(request)
    return GetReservation(reservation_repository=state.reservations).execute(
        reservation_id=ReservationId(reservation_id)
    )


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: str,
    request_dto: UpdateReservationRequest,
    request: Request,
) -> ReservationResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = UpdateReservation(reservation_repository=state.reservations, publisher=outbox)
        return use_case.execute(
            reservation_id=ReservationId(reservation_id),
            request_dto=request_dto,
            trace_ctx=trace_context(),
        )


@router.post("/{reservation_id}/cancelar", response_model=ReservationResponse)
def cancel_reservation(reservation_id: str, request: Request) -> ReservationResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = CancelReservation(reservation_repository=state.reservations, publisher=outbox)
        return use_case.execute(
            reservation_id=ReservationId(reservation_id),
            trace_ctx=trace_context(),
        )


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(reservation_id: str, request: Request) -> Response:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = DeleteReservation(reservation_repository=state.reservations, publisher=outbox)
        use_case.execute(reservation_id=ReservationId(reservation_id), trace_ctx=trace_context())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{reservation_id}/preorden", response_model=ReservationResponse)
def add_pre_order_line(
    reservation_id: str,
    request_dto: PreOrderLineRequest,
    request: Request,
) -> ReservationResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = AddPreOrderLine(
            reservation_repository=state.reservations,
            inventory_repository=state.inventory,
            publisher=outbox,
        )
        return use_case.execute(
            reservation_id=ReservationId(reservation_id),
            request_dto=request_dto,
            trace_ctx=trace_context(),
        )


@router.delete("/{reservation_id}/preorden/{line_id}", response_model=ReservationResponse)
def remove_pre_order_line(reservation_id: str, line_id: str, request: Request) -> ReservationResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = RemovePreOrderLine(reservation_repository=state.reservations, publisher=outbox)
        return use_case.execute(
            reservation_id=ReservationId(reservation_id),
            line_id=OrderLineId(line_id),
            trace_ctx=trace_context(),
        )
