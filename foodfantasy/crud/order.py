from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.core.constants import DELIVERY_TABLE, OrderStatus, PaymentStatus
from foodfantasy.models.order import Order
from foodfantasy.schemas.order import OrderCreate, OrderUpdate
from foodfantasy.utils.emails import normalize_email


def _new_order(order: OrderCreate) -> Order:
    data = order.model_dump()
    data["user_email"] = normalize_email(order.user_email)
    data["user_name"] = (order.user_name or "").strip() or "Guest User"
    data["category"] = (order.category or "").strip() or "Uncategorized"
    return Order(**data)


async def create_order(db: AsyncSession, order: OrderCreate) -> Order:
    new_order = _new_order(order)
    db.add(new_order)
    await db.commit()
    await db.refresh(new_order)
    return new_order


async def create_orders(db: AsyncSession, orders: Iterable[OrderCreate]) -> List[Order]:
    """Insert a whole checkout in one transaction; either every line is saved or none."""
    new_orders = [_new_order(o) for o in orders]
    db.add_all(new_orders)
    await db.commit()
    for o in new_orders:
        await db.refresh(o)
    return new_orders


async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.id == order_id))
    return result.scalar_one_or_none()


async def list_orders(
    db: AsyncSession,
    user_email: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[Order], int]:
    """Newest first. Returns (page_of_orders, total_matching)."""
    filters = []
    if user_email:
        filters.append(Order.user_email == normalize_email(user_email))
    if status:
        filters.append(Order.status == status)

    total = (await db.execute(select(func.count()).select_from(Order).where(*filters))).scalar_one()

    result = await db.execute(
        select(Order)
        .where(*filters)
        .order_by(Order.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return result.scalars().all(), total


async def update_order(db: AsyncSession, order_id: str, updates: OrderUpdate) -> Optional[Order]:
    order = await get_order(db, order_id)
    if not order:
        return None

    for key, value in updates.model_dump(exclude_none=True).items():
        setattr(order, key, value)

    await db.commit()
    await db.refresh(order)
    return order


async def get_occupied_tables(db: AsyncSession) -> dict[int, List[int]]:
    """Dine-in tables with an active order, mapped to the chairs already taken."""
    result = await db.execute(
        select(Order.table_number, Order.chair_indices).where(
            Order.is_in_restaurant.is_(True),
            Order.status.notin_([OrderStatus.COMPLETED, OrderStatus.SERVED]),
            Order.table_number != DELIVERY_TABLE,
        )
    )

    chairs: dict[int, set] = {}
    for table_number, indices in result.all():
        taken = chairs.setdefault(table_number, set())
        taken.update(i for i in (indices or []) if i is not None)

    return {table: sorted(taken) for table, taken in sorted(chairs.items())}


async def list_settled_orders(
    db: AsyncSession,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Order]:
    """Orders that count towards sales: paid, or completed (cash collected at the table)."""
    query = select(Order).where(
        or_(Order.payment_status == PaymentStatus.PAID, Order.status == OrderStatus.COMPLETED)
    )
    if start:
        query = query.where(Order.created_at >= start)
    if end:
        query = query.where(Order.created_at < end)

    result = await db.execute(query.order_by(Order.created_at))
    return result.scalars().all()
