import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.auth.dependencies import get_current_admin
from foodfantasy.config import settings
from foodfantasy.core.errors import NotFoundError, PushNotConfiguredError, SubscriptionExpiredError
from foodfantasy.core.responses import success
from foodfantasy.crud import subscription as subscription_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin
from foodfantasy.schemas.push import PushMessage, SendToUserRequest, SubscribeRequest, UnsubscribeRequest
from foodfantasy.services import push

log = logging.getLogger(__name__)

router = APIRouter()

MESSAGE_OPTIONS = {"icon", "tag", "data", "actions", "require_interaction"}


def _options(message: PushMessage) -> dict:
    return message.model_dump(include=MESSAGE_OPTIONS, exclude_none=True)


def _raise_if_disabled(result: dict) -> None:
    if result.get("error") == "VAPID keys not configured":
        raise PushNotConfiguredError()


# 🔑 GET: the browser needs the public key to create a subscription
@router.get("/vapid-key")
async def get_vapid_key():
    if not settings.vapid_public_key:
        raise PushNotConfiguredError()
    return success({"publicKey": settings.vapid_public_key}, message="VAPID public key")


@router.post("/subscribe")
async def subscribe(request: SubscribeRequest, db: AsyncSession = Depends(get_db)):
    subscription = request.subscription.model_dump(by_alias=True, exclude_none=True)
    sub = await subscription_crud.upsert_subscription(db, request.user_email, subscription)
    log.info("push subscription saved: email=%s", sub.user_email)
    return success(message="Subscription saved successfully", status_code=201)


@router.post("/unsubscribe")
async def unsubscribe(request: UnsubscribeRequest, db: AsyncSession = Depends(get_db)):
    removed = await subscription_crud.delete_subscriptions_for(db, request.user_email)
    log.info("push subscription removed: email=%s count=%s", request.user_email, removed)
    return success({"removed": removed}, message="Unsubscribed successfully")


@router.post("/send")
async def send_to_user(
    request: SendToUserRequest,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    result = await push.send_push_to_user(db, request.user_email, request.title, request.body, **_options(request))
    _raise_if_disabled(result)
    if result.get("error") == "User subscription not found":
        raise NotFoundError("Subscription", "User subscription not found")
    if result.get("removed") is True:
        raise SubscriptionExpiredError("Subscription expired and was removed")

    log.info("push sent to user: email=%s by=%s", request.user_email, admin.email)
    return success(result, message="Notification sent")


@router.post("/send-all")
async def send_to_all(
    message: PushMessage,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    result = await push.send_push_to_all(db, message.title, message.body, **_options(message))
    _raise_if_disabled(result)

    log.info("push broadcast: sent=%s total=%s by=%s", result.get("sent"), result.get("total"), admin.email)
    return success(result, message="Broadcast sent")
