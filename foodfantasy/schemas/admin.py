from datetime import datetime

from pydantic import EmailStr

from foodfantasy.schemas.common import CamelModel


class AdminRead(CamelModel):
    email: str
    is_super_admin: bool
    created_by: str
    created_at: datetime


class AdminAdd(CamelModel):
    email: EmailStr


class AdminStatus(CamelModel):
    is_admin: bool
    is_super_admin: bool
