from datetime import datetime
from typing import Optional

from pydantic import model_validator

from foodfantasy.schemas.common import CamelModel, NonEmptyStr, UtcDatetime


class OfferBase(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    image: Optional[str] = None
    active: bool = True
    valid_from: Optional[UtcDatetime] = None
    valid_until: Optional[UtcDatetime] = None


class OfferCreate(OfferBase):
    @model_validator(mode="after")
    def check_window(self):
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("validUntil must not be before validFrom")
        return self


class OfferUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    image: Optional[str] = None
    active: Optional[bool] = None
    valid_from: Optional[UtcDatetime] = None
    valid_until: Optional[UtcDatetime] = None


class OfferRead(OfferBase):
    id: str
    created_at: datetime
    updated_at: datetime
