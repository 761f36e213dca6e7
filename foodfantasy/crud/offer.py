from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.models.offer import Offer
from foodfantasy.schemas.offer import OfferCreate, OfferUpdate


async def create_offer(db: AsyncSession, offer: OfferCreate) -> Offer:
    new_offer = Offer(**offer.model_dump())
    db.add(new_offer)
    await db.commit()
    await db.refresh(new_offer)
    return new_offer


async def get_offers(db: AsyncSession) -> List[Offer]:
    result = await db.execute(select(Offer).order_by(Offer.created_at.desc()))
    return result.scalars().all()


async def get_active_offers(db: AsyncSession, now: Optional[datetime] = None) -> List[Offer]:
    """Active offers that have not expired; offers without valid_until never expire."""
    now = now or datetime.utcnow()
    result = await db.execute(
        select(Offer)
        .where(
            Offer.active.is_(True),
            or_(Offer.valid_until.is_(None), Offer.valid_until >= now),
            or_(Offer.valid_from.is_(None), Offer.valid_from <= now),
        )
        .order_by(Offer.created_at.desc())
    )
    return result.scalars().all()


async def get_offer(db: AsyncSession, offer_id: str) -> Optional[Offer]:
    result = await db.execute(select(Offer).where(Offer.id == offer_id))
    return result.scalar_one_or_none()


async def update_offer(db: AsyncSession, offer_id: str, updates: OfferUpdate) -> Optional[Offer]:
    offer = await get_offer(db, offer_id)
    if not offer:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        if value is None and key in ("title", "description", "active"):
            continue
        setattr(offer, key, value)

    await db.commit()
    await db.refresh(offer)
    return offer


async def delete_offer(db: AsyncSession, offer_id: str) -> Optional[Offer]:
    offer = await get_offer(db, offer_id)
    if offer:
        await db.delete(offer)
        await db.commit()
    return offer
