import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.auth.dependencies import get_current_admin
from foodfantasy.core.constants import PAGINATION, OrderStatus, PaymentStatus
from foodfantasy.core.errors import BadRequestError, NotFoundError
from foodfantasy.core.responses import success, success_with_pagination
from foodfantasy.crud import order as order_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin
from foodfantasy.schemas.order import OrderCreate, OrderRead, OrderUpdate
from foodfantasy.services import notifications
from foodfantasy.utils.broadcast import broadcast_order_event

log = logging.getLogger(__name__)

router = APIRouter()


# 📋 GET: orders, newest first, optionally filtered by customer and status
@router.get("")
async def list_orders(
    user_email: Optional[str] = Query(None, alias="userEmail"),
    status: Optional[OrderStatus] = Query(None),
    page: int = Query(PAGINATION["default_page"], ge=1),
    limit: int = Query(PAGINATION["default_limit"], ge=1, le=PAGINATION["max_limit"]),
    db: AsyncSession = Depends(get_db),
):
    orders, total = await order_crud.list_orders(db, user_email=user_email, status=status, page=page, limit=limit)
    return success_with_pagination(
        [OrderRead.model_validate(o) for o in orders],
        page=page,
        limit=limit,
        total=total,
        message="Orders retrieved successfully",
    )


# 🪑 GET: chairs taken by open dine-in orders, keyed by table number
@router.get("/occupied-tables")
async def occupied_tables(db: AsyncSession = Depends(get_db)):
    occupied = await order_crud.get_occupied_tables(db)
    return success(occupied, message="Occupied tables retrieved successfully")


@router.get("/{order_id}")
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await order_crud.get_order(db, order_id)
    if not order:
        raise NotFoundError("Order")
    return success(OrderRead.model_validate(order), message="Order retrieved successfully")


# ➕ POST: place a single order
@router.post("/create")
async def create_order(order_in: OrderCreate, db: AsyncSession = Depends(get_db)):
    order = await order_crud.create_order(db, order_in)
    log.info("order created: id=%s user=%s table=%s", order.id, order.user_email, order.table_number)

    await broadcast_order_event("newOrderPlaced", order)
    await notifications.notify_order_placed(db, order)
    return success(OrderRead.model_validate(order), message="Order created successfully", status_code=201)


# 🛒 POST: checkout a whole cart at once
@router.post("/create-multiple")
async def create_orders(
    orders_in: List[OrderCreate] = Body(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    orders = await order_crud.create_orders(db, orders_in)
    log.info("orders created: count=%s user=%s", len(orders), orders[0].user_email)

    for order in orders:
        await broadcast_order_event("newOrderPlaced", order)
    await notifications.notify_orders_placed(db, orders)
    return success(
        [OrderRead.model_validate(o) for o in orders],
        message=f"{len(orders)} orders created successfully",
        status_code=201,
    )


# ✏️ PUT: kitchen/cashier moves an order along or records payment
@router.put("/{order_id}")
async def update_order(
    order_id: str,
    updates: OrderUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    if not updates.has_changes():
        raise BadRequestError("At least one field (status, paymentStatus, or paymentMethod) must be provided")

    before = await order_crud.get_order(db, order_id)
    if not before:
        raise NotFoundError("Order")
    previous_status = before.status
    was_paid = before.payment_status == PaymentStatus.PAID

    order = await order_crud.update_order(db, order_id, updates)
    log.info(
        "order updated: id=%s by=%s status=%s payment=%s",
        order.id, admin.email, order.status.value, order.payment_status.value,
    )

    if updates.status is not None:
        await broadcast_order_event("orderStatusChanged", order)
    if order.payment_status == PaymentStatus.PAID and not was_paid:
        await broadcast_order_event("paymentSuccess", order)

    if updates.status is not None and order.status != previous_status:
        await notifications.notify_status_changed(db, order)
    return success(OrderRead.model_validate(order), message="Order updated successfully")
