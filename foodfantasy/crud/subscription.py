from typing import Iterable, List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.models.subscription import PushSubscription
from foodfantasy.utils.emails import normalize_email

WEB_PUSH = "web-push"


async def upsert_subscription(db: AsyncSession, user_email: str, subscription: dict) -> PushSubscription:
    """One web-push subscription per user; re-subscribing replaces the endpoint."""
    email = normalize_email(user_email)
    result = await db.execute(
        select(PushSubscription).where(
            PushSubscription.user_email == email,
            PushSubscription.platform == WEB_PUSH,
        )
    )
    sub = result.scalar_one_or_none()
    if sub:
        sub.subscription = subscription
    else:
        sub = PushSubscription(user_email=email, platform=WEB_PUSH, subscription=subscription)
        db.add(sub)

    await db.commit()
    await db.refresh(sub)
    return sub


async def get_subscription(db: AsyncSession, user_email: str) -> Optional[PushSubscription]:
    result = await db.execute(
        select(PushSubscription).where(
            PushSubscription.user_email == normalize_email(user_email),
            PushSubscription.platform == WEB_PUSH,
        )
    )
    return result.scalar_one_or_none()


async def get_subscriptions(db: AsyncSession, emails: Optional[Iterable[str]] = None) -> List[PushSubscription]:
    query = select(PushSubscription).where(PushSubscription.platform == WEB_PUSH)
    if emails is not None:
        query = query.where(PushSubscription.user_email.in_([normalize_email(e) for e in emails]))
    result = await db.execute(query)
    return result.scalars().all()


async def delete_subscriptions_for(db: AsyncSession, user_email: str) -> int:
    result = await db.execute(
        delete(PushSubscription).where(PushSubscription.user_email == normalize_email(user_email))
    )
    await db.commit()
    return result.rowcount


async def delete_subscriptions(db: AsyncSession, ids: List[str]) -> int:
    if not ids:
        return 0
    result = await db.execute(delete(PushSubscription).where(PushSubscription.id.in_(ids)))
    await db.commit()
    return result.rowcount
