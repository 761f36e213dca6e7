from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from foodfantasy.models.base import Base, value_enum
from foodfantasy.core.constants import FoodType
import uuid


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_email = Column(String, nullable=False, unique=True)  # one cart per user
    user_id = Column(String, nullable=False, default="")
    user_name = Column(String, nullable=False, default="Guest User")

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position",
        lazy="selectin",
    )


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    cart_id = Column(String, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    food_id = Column(String, nullable=False)
    food_name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="Uncategorized")
    type = Column(
        value_enum(FoodType),
        nullable=False,
        default=FoodType.VEG,
    )
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=False, default="")

    cart = relationship("Cart", back_populates="items")
