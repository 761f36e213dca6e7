from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import EmailStr, Field

from foodfantasy.core.constants import (
    CHAIRS_PER_TABLE,
    MAX_TABLE_NUMBER,
    FoodSize,
    FoodType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from foodfantasy.schemas.common import CamelModel, NonEmptyStr

ChairIndex = Annotated[int, Field(ge=0, le=CHAIRS_PER_TABLE - 1)]


class OrderBase(CamelModel):
    user_email: EmailStr
    user_name: str = "Guest User"
    user_id: str = ""

    food_name: NonEmptyStr
    category: str = "Uncategorized"
    type: FoodType = FoodType.VEG
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0.01)
    selected_size: Optional[FoodSize] = None
    image: str = ""

    table_number: int = Field(0, ge=0, le=MAX_TABLE_NUMBER)
    is_in_restaurant: bool = True
    chair_indices: List[ChairIndex] = Field(default_factory=list, max_length=CHAIRS_PER_TABLE)
    contact_number: str = ""

    delivery_address: str = ""
    delivery_latitude: Optional[float] = None
    delivery_longitude: Optional[float] = None


class OrderCreate(OrderBase):
    # Clients may pre-set these (e.g. cash counter orders); defaults apply otherwise
    status: OrderStatus = OrderStatus.ORDER
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_method: Optional[PaymentMethod] = None


class OrderUpdate(CamelModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None

    def has_changes(self) -> bool:
        return any(v is not None for v in (self.status, self.payment_status, self.payment_method))


class OrderRead(OrderBase):
    id: str
    user_email: str
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    created_at: datetime
    updated_at: datetime
