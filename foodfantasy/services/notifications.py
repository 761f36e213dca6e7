import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.config import settings
from foodfantasy.core.constants import STATUS_MESSAGES
from foodfantasy.models.order import Order
from foodfantasy.services import push

log = logging.getLogger(__name__)


async def _safely(label: str, coro) -> None:
    # Order flows must not fail because a push service is slow or down
    try:
        await coro
    except Exception:
        log.exception("notification failed: %s", label)


async def notify_order_placed(db: AsyncSession, order: Order) -> None:
    timeout = settings.push_timeout_seconds
    await _safely(
        f"order placed (user) {order.id}",
        push.send_push_to_user(
            db,
            order.user_email,
            "Order Placed!",
            f"Your order for {order.food_name} has been placed successfully!",
            timeout=timeout,
            tag=f"order-{order.id}",
            data={"orderId": order.id, "type": "new_order"},
        ),
    )
    await _safely(
        f"order placed (admins) {order.id}",
        push.send_push_to_admins(
            db,
            "New Order Placed!",
            f"New order from {order.user_email or 'Guest'} for {order.food_name}",
            timeout=timeout,
            tag=f"admin-order-{order.id}",
            data={"orderId": order.id, "type": "new_order_admin"},
        ),
    )


async def notify_orders_placed(db: AsyncSession, orders: List[Order]) -> None:
    if not orders:
        return
    first = orders[0]
    await _safely(
        f"checkout (admins) {first.id}",
        push.send_push_to_admins(
            db,
            "New Orders Placed!",
            f"{len(orders)} new orders received from {first.user_email or 'Guest'}",
            timeout=settings.push_timeout_seconds,
            tag=f"admin-multiple-orders-{first.id}",
            data={"count": len(orders), "type": "new_orders_admin"},
        ),
    )


async def notify_status_changed(db: AsyncSession, order: Order) -> None:
    status = order.status.value
    await _safely(
        f"status change {order.id}",
        push.send_push_to_user(
            db,
            order.user_email,
            STATUS_MESSAGES.get(status, "Order Status Updated"),
            f"{order.food_name} - Status: {status}",
            timeout=settings.push_timeout_seconds,
            tag=f"order-{order.id}",
            data={"orderId": order.id, "status": status, "type": "status_change"},
        ),
    )
