from __future__ import annotations

from kflow.application.dto.responses import KitchenBoardResponse, KitchenStatsResponse
from kflow.application.mappers.order_mapper import to_order_response
from kflow.application.metrics.order_lifecycle import record_kitchen_board_size
from kflow.application.ports.repositories import OrderRepository
from kflow.domain.order.entities import KitchenStatus


class GetKitchenBoard:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self) -> KitchenBoardResponse:
        # Orders without food lines never reach the kitchen.
        tracked = sorted(
            (
                order
                for order in self._order_repository.list_active()
                if order.has_food and order.kitchen_status != KitchenStatus.READY
            ),
            key=lambda order: order.created_at,
        )
        dispatched = sorted(
            self._order_repository.list_dispatched(),
            key=lambda order: order.dispatched_at or order.created_at,
            reverse=True,
        )

        pending = sum(1 for order in tracked if order.kitchen_status == KitchenStatus.PENDING)
        preparing = sum(1 for order in tracked if order.kitchen_status == KitchenStatus.PREPARING)
        record_kitchen_board_size("pending", pending)
        record_kitchen_board_size("preparing", preparing)
        record_kitchen_board_size("dispatched", len(dispatched))

        return KitchenBoardResponse(
            orders=[to_order_response(order) for order in tracked],
            dispatched=[to_order_response(order) for order in dispatched],
            stats=KitchenStatsResponse(
                pending=pending,
                preparing=preparing,
                dispatched=len(dispatched),
                totalOrders=len(tracked) + len(dispatched),
            ),
        )
