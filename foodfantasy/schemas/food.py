from datetime import datetime
from typing import Optional

from pydantic import Field

from foodfantasy.core.constants import FoodType
from foodfantasy.schemas.common import CamelModel, NonEmptyStr


class FoodBase(CamelModel):
    name: NonEmptyStr
    category: NonEmptyStr
    type: FoodType
    price: float = Field(..., gt=0)
    image: Optional[str] = None
    available: bool = True


class FoodCreate(FoodBase):
    pass


class FoodUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    category: Optional[NonEmptyStr] = None
    type: Optional[FoodType] = None
    price: Optional[float] = Field(None, gt=0)
    image: Optional[str] = None
    available: Optional[bool] = None


class FoodRead(FoodBase):
    id: str
    created_at: datetime
    updated_at: datetime
