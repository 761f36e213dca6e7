from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.core.errors import BadRequestError
from foodfantasy.crud import order as order_crud
from foodfantasy.models.order import Order
from foodfantasy.schemas.sales import SalesSummary, TopItem

RANGES = ("today", "date", "365days", "all")
TOP_ITEMS = 5


def _line_total(order: Order) -> float:
    return float(order.price or 0) * int(order.quantity or 0)


def date_window(range_: str, today: date, day: Optional[date] = None) -> Tuple[Optional[datetime], Optional[datetime]]:
    """[start, end) in naive UTC for a dashboard range."""
    tomorrow = datetime.combine(today + timedelta(days=1), time.min)
    if range_ == "today":
        return datetime.combine(today, time.min), tomorrow
    if range_ == "date":
        if day is None:
            raise BadRequestError("A date is required when range is 'date'")
        return datetime.combine(day, time.min), datetime.combine(day + timedelta(days=1), time.min)
    if range_ == "365days":
        return datetime.combine(today - timedelta(days=365), time.min), tomorrow
    if range_ == "all":
        return None, None
    raise BadRequestError(f"Range must be one of: {', '.join(RANGES)}")


def summarize(orders: Iterable[Order], range_: str, today: date, day: Optional[date] = None) -> SalesSummary:
    orders = list(orders)
    week_start = today - timedelta(days=7)

    def total(rows):
        return round(sum(_line_total(o) for o in rows), 2)

    qty = Counter()
    for o in orders:
        qty[o.food_name] += int(o.quantity or 0)

    return SalesSummary(
        range=range_,
        day=day,
        order_count=len(orders),
        total_sales=total(orders),
        today_sales=total(o for o in orders if o.created_at.date() == today),
        last_7_days_sales=total(o for o in orders if week_start <= o.created_at.date() <= today),
        this_month_sales=total(
            o for o in orders
            if o.created_at.year == today.year and o.created_at.month == today.month
        ),
        top_items=[TopItem(name=name, qty=n) for name, n in qty.most_common(TOP_ITEMS)],
    )


async def sales_summary(db: AsyncSession, range_: str = "today", day: Optional[date] = None, today: Optional[date] = None) -> SalesSummary:
    today = today or datetime.utcnow().date()
    start, end = date_window(range_, today, day)
    orders = await order_crud.list_settled_orders(db, start, end)
    return summarize(orders, range_, today, day)
