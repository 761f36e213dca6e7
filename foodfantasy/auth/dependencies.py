# auth/dependencies.py
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.core.errors import ForbiddenError
from foodfantasy.crud import admin as admin_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin


# Sign-in happens at the external identity provider; the client forwards the signed-in email.
async def get_requester_email(x_user_email: Optional[str] = Header(None)) -> Optional[str]:
    email = (x_user_email or "").strip().lower()
    return email or None


async def get_current_admin(
    email: Optional[str] = Depends(get_requester_email),
    db: AsyncSession = Depends(get_db),
) -> Admin:
    if not email:
        raise ForbiddenError("Unauthorized. Admin access required.")

    admin = await admin_crud.get_admin(db, email)
    if not admin:
        raise ForbiddenError("Unauthorized. Admin access required.")
    return admin


async def get_current_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if not admin.is_super_admin:
        raise ForbiddenError("Only super admins can manage admins")
    return admin
