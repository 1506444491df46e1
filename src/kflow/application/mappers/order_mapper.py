from __future__ import annotations

from kflow.application.dto.responses import (
    MoneyResponse,
    OrderLineResponse,
    OrderResponse,
)
from kflow.domain.common.money import Money
from kflow.domain.order.entities import Order, OrderLine


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=money.amount_cents, currency=money.currency)


def to_order_line_response(line: OrderLine) -> OrderLineResponse:
    return OrderLineResponse(
        lineId=str(line.line_id),
        itemId=str(line.item_id),
        name=line.name,
        category=line.category,
        quantity=line.quantity,
        unitPrice=to_money_response(line.unit_price),
        lineTotal=to_money_response(line.line_total),
        kitchenStatus=line.kitchen_status.value if line.kitchen_status else None,
        notes=line.notes,
    )


def to_order_response(order: Order) -> OrderResponse:
    kitchen_status = order.kitchen_status
    return OrderResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        tableNumber=order.table_number,
        lines=[to_order_line_response(line) for line in order.lines],
        total=to_money_response(order.total),
        kitchenStatus=kitchen_status.value if kitchen_status else None,
        notes=order.notes,
        userId=order.user_id,
        createdAt=order.created_at,
        dispatchedAt=order.dispatched_at,
    )
