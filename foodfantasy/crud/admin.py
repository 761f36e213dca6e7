from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.models.admin import Admin
from foodfantasy.utils.emails import normalize_email


async def get_admin(db: AsyncSession, email: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(Admin.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_admins(db: AsyncSession) -> List[Admin]:
    result = await db.execute(select(Admin).order_by(Admin.created_at.desc()))
    return result.scalars().all()


async def get_admin_emails(db: AsyncSession) -> List[str]:
    result = await db.execute(select(Admin.email))
    return [normalize_email(e) for e in result.scalars().all()]


async def create_admin(db: AsyncSession, email: str, created_by: str = "system", is_super_admin: bool = False) -> Admin:
    """Raises IntegrityError when the email is already an admin."""
    admin = Admin(email=normalize_email(email), created_by=created_by, is_super_admin=is_super_admin)
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def delete_admin(db: AsyncSession, admin: Admin) -> None:
    await db.delete(admin)
    await db.commit()
