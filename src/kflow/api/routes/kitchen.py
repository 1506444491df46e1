from __future__ import annotations

from fastapi import APIRouter, Request

from kflow.api.dependencies import restaurant_state, state_mutation, trace_context
from kflow.application.dto.requests import KitchenStatusRequest
from kflow.application.dto.responses import KitchenBoardResponse, OrderResponse
from kflow.application.use_cases.kitchen_board import GetKitchenBoard
from kflow.application.use_cases.resume_order import ResumeDispatchedOrder
from kflow.application.use_cases.update_kitchen_status import UpdateOrderKitchenStatus
from kflow.domain.common.ids import OrderId, TableId

router = APIRouter(prefix="/api/cocina", tags=["cocina"])


@router.get("", response_model=KitchenBoardResponse)
def kitchen_board(request: Request) -> KitchenBoardResponse:
    state = restaurant_state(request)
    with state.lock:
        return GetKitchenBoard(order_repository=state.orders).execute()


@router.post("/mesas/{table_id}/estado", response_model=OrderResponse)
def update_kitchen_status(
    table_id: str,
    request_dto: KitchenStatusRequest,
    request: Request,
) -> OrderResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = UpdateOrderKitchenStatus(order_repository=state.orders, publisher=outbox)
        return use_case.execute(
            table_id=TableId(table_id),
            request_dto=request_dto,
            trace_ctx=trace_context(),
        )


@router.post("/despachadas/{order_id}/retomar", response_model=OrderResponse)
def resume_dispatched_order(order_id: str, request: Request) -> OrderResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = ResumeDispatchedOrder(order_repository=state.orders, publisher=outbox)
        return use_case.execute(order_id=OrderId(order_id), trace_ctx=trace_context())
