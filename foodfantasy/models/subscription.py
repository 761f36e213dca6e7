from sqlalchemy import Column, String, DateTime, JSON, UniqueConstraint
from datetime import datetime
from foodfantasy.models.base import Base
import uuid


class PushSubscription(Base):
    __tablename__ = "push_subscriptions"
    __table_args__ = (UniqueConstraint("user_email", "platform", name="uq_push_subscriptions_email_platform"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_email = Column(String, nullable=False, index=True)
    platform = Column(String, nullable=False, default="web-push")
    # {"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}} as produced by PushManager.subscribe()
    subscription = Column(JSON, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
