from typing import Any, Dict, List, Optional

from pydantic import EmailStr

from foodfantasy.schemas.common import CamelModel, NonEmptyStr


class SubscriptionKeys(CamelModel):
    p256dh: str
    auth: str


class WebPushSubscription(CamelModel):
    endpoint: NonEmptyStr
    keys: SubscriptionKeys
    expiration_time: Optional[float] = None


class SubscribeRequest(CamelModel):
    user_email: EmailStr
    subscription: WebPushSubscription


class UnsubscribeRequest(CamelModel):
    user_email: EmailStr


class NotificationAction(CamelModel):
    action: str
    title: str
    icon: Optional[str] = None


class PushMessage(CamelModel):
    title: NonEmptyStr
    body: NonEmptyStr
    icon: Optional[str] = None
    tag: Optional[str] = None
    data: Dict[str, Any] = {}
    actions: List[NotificationAction] = []
    require_interaction: bool = False


class SendToUserRequest(PushMessage):
    user_email: EmailStr
