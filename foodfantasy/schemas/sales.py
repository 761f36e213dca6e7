from datetime import date
from typing import List, Optional

from foodfantasy.schemas.common import CamelModel


class TopItem(CamelModel):
    name: str
    qty: int


class SalesSummary(CamelModel):
    range: str
    day: Optional[date] = None
    order_count: int
    total_sales: float
    today_sales: float
    last_7_days_sales: float
    this_month_sales: float
    top_items: List[TopItem] = []
