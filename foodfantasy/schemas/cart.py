from typing import List

from pydantic import EmailStr, Field

from foodfantasy.core.constants import FoodType
from foodfantasy.schemas.common import CamelModel, NonEmptyStr


class CartItemRead(CamelModel):
    food_id: str
    food_name: str
    category: str = "Uncategorized"
    type: FoodType = FoodType.VEG
    quantity: int
    price: float
    image: str = ""


class CartItemAdd(CamelModel):
    user_email: EmailStr
    user_id: str = ""
    user_name: str = "Guest User"

    food_id: NonEmptyStr
    food_name: NonEmptyStr
    category: str = "Uncategorized"
    type: FoodType = FoodType.VEG
    quantity: int = Field(1, ge=1)
    price: float = Field(..., ge=0)
    image: str = ""


class CartItemUpdate(CamelModel):
    user_email: EmailStr
    food_id: NonEmptyStr
    quantity: int = Field(..., ge=1)


class CartRead(CamelModel):
    user_email: str
    items: List[CartItemRead] = []
