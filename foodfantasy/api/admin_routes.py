import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.auth.dependencies import get_current_admin, get_current_super_admin
from foodfantasy.core.errors import BadRequestError, ConflictError, NotFoundError
from foodfantasy.core.responses import success
from foodfantasy.crud import admin as admin_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin
from foodfantasy.schemas.admin import AdminAdd, AdminRead, AdminStatus
from foodfantasy.services.sales import sales_summary

log = logging.getLogger(__name__)

router = APIRouter()


# 🔍 GET: lets the frontend decide whether to show the dashboard
@router.get("/check")
async def check_admin(
    email: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    admin = await admin_crud.get_admin(db, email)
    status = AdminStatus(is_admin=admin is not None, is_super_admin=bool(admin and admin.is_super_admin))
    return success(status, message="Admin status retrieved")


@router.get("/all")
async def list_admins(
    db: AsyncSession = Depends(get_db),
    super_admin: Admin = Depends(get_current_super_admin),
):
    admins = await admin_crud.get_admins(db)
    return success([AdminRead.model_validate(a) for a in admins], message="Admins retrieved successfully")


@router.post("/add")
async def add_admin(
    admin_in: AdminAdd,
    db: AsyncSession = Depends(get_db),
    super_admin: Admin = Depends(get_current_super_admin),
):
    if await admin_crud.get_admin(db, admin_in.email):
        raise ConflictError("This email is already an admin")

    admin = await admin_crud.create_admin(db, admin_in.email, created_by=super_admin.email)
    log.info("admin added: email=%s by=%s", admin.email, super_admin.email)
    return success(AdminRead.model_validate(admin), message="Admin added successfully", status_code=201)


@router.delete("/remove")
async def remove_admin(
    email: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    super_admin: Admin = Depends(get_current_super_admin),
):
    admin = await admin_crud.get_admin(db, email)
    if not admin:
        raise NotFoundError("Admin")
    if admin.is_super_admin:
        raise BadRequestError("Cannot remove a super admin")

    await admin_crud.delete_admin(db, admin)
    log.info("admin removed: email=%s by=%s", admin.email, super_admin.email)
    return success({"email": admin.email}, message="Admin removed successfully")


# 📊 GET: dashboard sales totals
@router.get("/sales")
async def get_sales(
    range_: str = Query("today", alias="range"),
    day: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    summary = await sales_summary(db, range_=range_, day=day)
    return success(summary, message="Sales summary retrieved successfully")
