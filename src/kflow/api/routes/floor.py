from __future__ import annotations

from fastapi import APIRouter, Request, status

from kflow.api.dependencies import restaurant_state, state_mutation, trace_context
from kflow.application.dto.requests import OpenOrderRequest, OrderLineRequest
from kflow.application.dto.responses import ActiveOrdersResponse, OrderResponse, TableListResponse
from kflow.application.use_cases.list_tables import ListTables
from kflow.application.use_cases.open_order import GetActiveOrder, ListActiveOrders, OpenOrder
from kflow.application.use_cases.order_lines import AddOrderLine, RemoveOrderLine
from kflow.domain.common.ids import OrderLineId, TableId

router = APIRouter(prefix="/api/sala", tags=["sala"])


@router.get("/mesas", response_model=TableListResponse)
def list_tables(request: Request) -> TableListResponse:
    state = restaurant_state(request)
    return ListTables(table_repository=state.tables).execute()


@router.get("/pedidos", response_model=ActiveOrdersResponse)
def list_active_orders(request: Request) -> ActiveOrdersResponse:
    state = restaurant_state(request)
    return ListActiveOrders(order_repository=state.orders).execute()


@router.post(
    "/mesas/{table_id}/pedido",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def open_order(table_id: str, request_dto: OpenOrderRequest, request: Request) -> OrderResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = OpenOrder(
            order_repository=state.orders,
            table_repository=state.tables,
            inventory_repository=state.inventory,
            publisher=outbox,
        )
        return use_case.execute(
            table_id=TableId(table_id),
            request_dto=request_dto,
            trace_ctx=trace_context(),
        )


@router.get("/mesas/{table_id}/pedido", response_model=OrderResponse)
def get_active_order(table_id: str, request: Request) -> OrderResponse:
    state = restaurant_state(request)
    return GetActiveOrder(order_repository=state.orders).execute(table_id=TableId(table_id))


@router.post("/mesas/{table_id}/pedido/lineas", response_model=OrderResponse)
def add_order_line(table_id: str, request_dto: OrderLineRequest, request: Request) -> OrderResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = AddOrderLine(
            order_repository=state.orders,
            inventory_repository=state.inventory,
            publisher=outbox,
        )
        return use_case.execute(
            table_id=TableId(table_id),
            request_dto=request_dto,
            trace_ctx=trace_context(),
        )


@router.delete("/mesas/{table_id}/pedido/lineas/{line_id}", response_model=OrderResponse)
def remove_order_line(table_id: str, line_id: str, request: Request) -> OrderResponse:
    state = restaurant_state(request)
    with state_mutation(request) as outbox:
        use_case = RemoveOrderLine(order_repository=state.orders, publisher=outbox)
        return use_case.execute(
            table_id=TableId(table_id),
            line_id=OrderLineId(line_id),
            trace_ctx=trace_context(),
        )
