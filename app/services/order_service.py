"""
Order lifecycle: placement with token assignment, status changes through the
kitchen pipeline, and the stock side effect of completing an order.
"""
import logging
import random
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from tortoise.transactions import in_transaction

from app.core.exceptions import InvalidStatusError, InvalidTransitionError, NotFoundError
from app.core.money import round_amount
from app.events.broadcaster import Broadcaster, ORDER_CREATED, ORDER_UPDATED
from app.models.menu import MenuItem
from app.models.order import (
    FINAL_STATUSES,
    STATUS_PIPELINE,
    Order,
    OrderPriority,
    OrderStatus,
    PaymentMethod,
)
from app.models.stock_adjustment import StockAdjustment
from app.schemas.order import OrderOut
from app.services.menu_service import notify_menu_changed
from app.services.token_service import allocate_token

log = logging.getLogger(__name__)

SAMPLE_ITEMS = [
    {"name": "Masala Dosa", "quantity": 1},
    {"name": "Cold Coffee", "quantity": 2},
    {"name": "Paneer Roll", "quantity": 1},
    {"name": "Veg Thali", "quantity": 1},
    {"name": "Idli Sambar", "quantity": 3},
]
SAMPLE_UNIT_PRICE = 50


def parse_status(value: Union[str, OrderStatus]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatusError("Unknown status value.") from None


def next_status(current: Union[str, OrderStatus, None]) -> Optional[OrderStatus]:
    """
    Successor of `current` in the forward pipeline, or None when `current` is
    the last stage, cancelled, or not a status at all.
    """
    try:
        idx = STATUS_PIPELINE.index(OrderStatus(current))
    except ValueError:
        return None
    if idx == len(STATUS_PIPELINE) - 1:
        return None
    return STATUS_PIPELINE[idx + 1]


def serialize_order(order: Order) -> Dict[str, Any]:
    """Full order record as sent to clients over HTTP and the event stream."""
    out = OrderOut.model_validate(order)
    out.next_status = next_status(order.status)
    return out.model_dump(mode="json", by_alias=True)


def _normalize_items(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    normalized = []
    for item in items:
        name = (item.get("name") or "").strip()
        if not name:
            raise ValueError("Every order item needs a name.")
        quantity = item.get("quantity")
        quantity = 1 if quantity is None else quantity
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ValueError(f"Quantity for '{name}' must be a positive integer.")
        line = {"name": name, "quantity": quantity}
        if item.get("notes"):
            line["notes"] = item["notes"]
        normalized.append(line)
    return normalized


async def create_order(
    items: List[Dict[str, Any]],
    total_amount,
    student_name: Optional[str] = None,
    table_number: Optional[str] = None,
    payment_method: Union[str, PaymentMethod] = PaymentMethod.UPI,
    priority: Union[str, OrderPriority] = OrderPriority.NORMAL,
    notes: Optional[str] = None,
    token_number: Optional[int] = None,
    broadcaster: Optional[Broadcaster] = None,
) -> Order:
    """
    Places an order in `pending` with the next token number and announces it
    with an `order:new` event.
    """
    if not items:
        raise ValueError("Order must include at least one item.")
    line_items = _normalize_items(items)

    token = await allocate_token(token_number)
    order = await Order.create(
        token_number=token,
        table_number=table_number or None,
        student_name=student_name,
        payment_method=PaymentMethod(payment_method),
        priority=OrderPriority(priority),
        status=OrderStatus.PENDING,
        items=line_items,
        total_amount=round_amount(total_amount or 0),
        notes=notes,
    )
    log.info(f"Order {order.id} placed with token #{token} ({len(line_items)} line items).")

    if broadcaster is not None:
        broadcaster.broadcast(ORDER_CREATED, serialize_order(order))
    return order


async def get_order(order_id: UUID) -> Order:
    order = await Order.get_or_none(id=order_id)
    if not order:
        raise NotFoundError("Order not found.")
    return order


async def list_orders(status: Optional[Union[str, OrderStatus]] = None, student_name: Optional[str] = None) -> List[Order]:
    """Orders newest first, optionally filtered by status and customer name."""
    query = Order.all()
    if status:
        query = query.filter(status=parse_status(status))
    if student_name:
        query = query.filter(student_name=student_name)
    return await query.order_by("-created_at")


async def apply_stock_for_order(order: Order, broadcaster: Optional[Broadcaster] = None) -> bool:
    """
    Decrements stock for each line item of a completed order, floored at zero,
    and re-derives availability. Items that match no menu entry are skipped.

    Runs at most once per order (StockAdjustment marker) and never raises:
    a failure is logged and the whole adjustment rolls back so the stock
    reconciler can retry it. Returns True when stock was changed.
    """
    try:
        async with in_transaction() as conn:
            _, created = await StockAdjustment.get_or_create(order_id=order.id, using_db=conn)
            if not created:
                log.info(f"Stock already adjusted for order {order.id}, skipping.")
                return False

            for line in order.items or []:
                menu_item = await MenuItem.filter(name=line.get("name")).using_db(conn).first()
                if not menu_item:
                    continue
                menu_item.stock = max(0, menu_item.stock - int(line.get("quantity") or 1))
                menu_item.is_available = menu_item.stock > 0
                await menu_item.save(using_db=conn)
    except Exception:
        log.exception(f"Error updating stock for order {order.id}")
        return False

    log.info(f"Stock adjusted for completed order {order.id}.")
    notify_menu_changed(broadcaster)
    return True


async def update_order_status(
    order_id: UUID,
    new_status: Union[str, OrderStatus],
    broadcaster: Optional[Broadcaster] = None,
) -> Order:
    """
    Sets the order status and broadcasts `order:update`.

    Orders in a final state (picked_up, cancelled) only accept the same status
    again. Moving to picked_up from any other status triggers the stock
    side effect; its failure never blocks the status change.
    """
    status = parse_status(new_status)
    order = await get_order(order_id)

    previous_status = order.status
    if previous_status in FINAL_STATUSES and status != previous_status:
        raise InvalidTransitionError(
            f"Order is already in a final state: {previous_status.value}. Status cannot be updated."
        )

    order.status = status
    await order.save(update_fields=["status", "updated_at"])
    log.info(f"Order {order.id} (token #{order.token_number}) moved {previous_status.value} -> {status.value}.")

    if status == OrderStatus.PICKED_UP and previous_status != OrderStatus.PICKED_UP:
        log.info(f"Order {order.id} completed. Revenue: {order.total_amount}")
        await apply_stock_for_order(order, broadcaster)

    if broadcaster is not None:
        broadcaster.broadcast(ORDER_UPDATED, serialize_order(order))
    return order


def build_sample_order(rng: random.Random) -> Dict[str, Any]:
    items = [dict(item) for item in rng.sample(SAMPLE_ITEMS, rng.randint(1, 3))]
    return {
        "items": items,
        "total_amount": sum(SAMPLE_UNIT_PRICE * item["quantity"] for item in items),
        "student_name": f"Student {rng.randint(1, 200)}",
        "table_number": str(rng.randint(1, 20)),
        "payment_method": PaymentMethod.UPI if rng.random() > 0.5 else PaymentMethod.CASH,
        "priority": OrderPriority.RUSH if rng.random() > 0.85 else OrderPriority.NORMAL,
        "notes": "Less spicy" if rng.random() > 0.7 else None,
    }


async def seed_orders(count: int, broadcaster: Optional[Broadcaster] = None, rng: Optional[random.Random] = None) -> List[Order]:
    """Creates `count` random demo orders through the normal placement path."""
    rng = rng or random.Random()
    created = []
    for _ in range(count):
        created.append(await create_order(broadcaster=broadcaster, **build_sample_order(rng)))
    return created
