from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from kflow.domain.common.ids import InventoryItemId, OrderId, OrderLineId, TableId
from kflow.domain.common.money import Money
from kflow.domain.inventory.entities import InventoryItem
from kflow.domain.order.aggregator import add_line, build_line, remove_line
from kflow.domain.order.entities import (
    InsufficientStockError,
    InvalidQuantityError,
    KitchenStatus,
    Order,
    OrderNotTrackedError,
    OrderTransitionError,
    aggregate_kitchen_status,
    create_open_order,
)


def _item(item_id: str, price: str, category: str = "Comida", quantity: int = 10) -> InventoryItem:
    return InventoryItem(
        item_id=InventoryItemId(item_id),
        name=f"Item {item_id}",
        category=category,
        price=Money.from_decimal(price),
        quantity=quantity,
        unit="porciones",
    )


def _order(*lines) -> Order:
    return create_open_order(
        order_id=OrderId("ord_001"),
        table_id=TableId("1"),
        table_number=1,
        lines=lines,
        now=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_total_follows_every_add_and_remove() -> None:
    first = build_line(_item("inv-a", "10.00"), quantity=2, line_id=OrderLineId("l1"))
    second = build_line(_item("inv-b", "5.50"), quantity=1, line_id=OrderLineId("l2"))

    order = _order()
    order = order.with_lines(add_line(order.lines, first))
    order = order.with_lines(add_line(order.lines, second))
    assert order.total == Money(amount_cents=2550, currency="USD")
    assert str(order.total.to_decimal()) == "25.50"

    order = order.with_lines(remove_line(order.lines, OrderLineId("l1")))
    assert order.total.amount_cents == 550
    assert str(order.total.to_decimal()) == "5.50"


def test_remove_unknown_line_is_noop() -> None:
    line = build_line(_item("inv-a", "3.00"), quantity=1, line_id=OrderLineId("l1"))
    lines = remove_line((line,), OrderLineId("missing"))
    assert lines == (line,)


def test_build_line_copies_catalog_values_at_add_time() -> None:
    item = _item("inv-a", "4.25")
    line = build_line(item, quantity=3, line_id=OrderLineId("l1"), notes="sin cebolla")

    assert line.name == item.name
    assert line.unit_price == item.price
    assert line.line_total.amount_cents == 1275
    assert line.kitchen_status == KitchenStatus.PENDING
    assert line.notes == "sin cebolla"


def test_non_food_lines_carry_no_kitchen_status() -> None:
    line = build_line(_item("inv-drink", "2.00", category="Bebida"), 1, OrderLineId("l1"))
    assert line.kitchen_status is None
    assert not line.is_food


@pytest.mark.parametrize("quantity", [0, -2])
def test_build_line_rejects_non_positive_quantity(quantity: int) -> None:
    with pytest.raises(InvalidQuantityError):
        build_line(_item("inv-a", "1.00"), quantity=quantity, line_id=OrderLineId("l1"))


def test_build_line_rejects_out_of_stock_item() -> None:
    with pytest.raises(InsufficientStockError):
        build_line(_item("inv-a", "1.00", quantity=0), quantity=1, line_id=OrderLineId("l1"))


def test_aggregate_kitchen_status_rules() -> None:
    pending = build_line(_item("a", "1.00"), 1, OrderLineId("l1"))
    preparing = pending.with_kitchen_status(KitchenStatus.PREPARING)
    ready = pending.with_kitchen_status(KitchenStatus.READY)
    drink = build_line(_item("b", "1.00", category="Bebida"), 1, OrderLineId("l2"))

    assert aggregate_kitchen_status([drink]) is None
    assert aggregate_kitchen_status([pending, drink]) == KitchenStatus.PENDING
    assert aggregate_kitchen_status([pending, preparing]) == KitchenStatus.PREPARING
    assert aggregate_kitchen_status([ready, preparing]) == KitchenStatus.PREPARING
    assert aggregate_kitchen_status([ready, pending]) == KitchenStatus.PENDING
    assert aggregate_kitchen_status([ready, ready, drink]) == KitchenStatus.READY


def test_kitchen_status_moves_forward_one_step_at_a_time() -> None:
    order = _order(
        build_line(_item("a", "8.00"), 1, OrderLineId("l1")),
        build_line(_item("b", "6.00"), 2, OrderLineId("l2")),
    )

    preparing = order.update_kitchen_status(KitchenStatus.PREPARING)
    assert preparing.kitchen_status == KitchenStatus.PREPARING
    assert preparing.update_kitchen_status(KitchenStatus.PREPARING) is preparing

    with pytest.raises(OrderTransitionError):
        order.update_kitchen_status(KitchenStatus.READY)
    with pytest.raises(OrderTransitionError):
        preparing.update_kitchen_status(KitchenStatus.PENDING)


def test_order_without_food_is_not_tracked_by_kitchen() -> None:
    order = _order(build_line(_item("b", "2.00", category="Bebida"), 1, OrderLineId("l1")))
    with pytest.raises(OrderNotTrackedError):
        order.update_kitchen_status(KitchenStatus.PREPARING)


def test_dispatch_then_resume_resets_food_to_preparing() -> None:
    order = _order(
        build_line(_item("a", "8.00"), 1, OrderLineId("l1")),
        build_line(_item("b", "2.00", category="Bebida"), 1, OrderLineId("l2")),
    )
    with pytest.raises(OrderTransitionError):
        order.dispatch(order.created_at)

    ready = order.update_kitchen_status(KitchenStatus.PREPARING).update_kitchen_status(
        KitchenStatus.READY
    )
    dispatched_at = order.created_at + timedelta(minutes=12)
    dispatched = ready.dispatch(dispatched_at)
    assert dispatched.dispatched_at == dispatched_at
    assert dispatched.dispatched_at >= dispatched.created_at

    resumed = dispatched.resume()
    assert resumed.dispatched_at is None
    assert resumed.table_id == order.table_id
    assert resumed.kitchen_status == KitchenStatus.PREPARING
    assert resumed.lines[1].kitchen_status is None


def test_status_change_reaches_food_lines_added_later() -> None:
    preparing = _order(build_line(_item("a", "8.00"), 1, OrderLineId("l1"))).update_kitchen_status(
        KitchenStatus.PREPARING
    )
    mixed = preparing.with_lines(
        add_line(
            preparing.lines,
            build_line(_item("b", "6.00"), 1, OrderLineId("l2")),
        )
    )
    mixed = mixed.with_lines(
        add_line(mixed.lines, build_line(_item("c", "2.00", category="Bebida"), 1, OrderLineId("l3")))
    )
    assert mixed.kitchen_status == KitchenStatus.PREPARING

    caught_up = mixed.update_kitchen_status(KitchenStatus.PREPARING)
    assert [line.kitchen_status for line in caught_up.lines] == [
        KitchenStatus.PREPARING,
        KitchenStatus.PREPARING,
        None,
    ]
    assert caught_up.update_kitchen_status(KitchenStatus.PREPARING) is caught_up

    ready = mixed.update_kitchen_status(KitchenStatus.READY)
    assert [line.kitchen_status for line in ready.lines] == [
        KitchenStatus.READY,
        KitchenStatus.READY,
        None,
    ]
    with pytest.raises(OrderTransitionError):
        mixed.update_kitchen_status(KitchenStatus.PENDING)
