from sqlalchemy import Column, String, Integer, Float, DateTime, Boolean, JSON
from datetime import datetime
from foodfantasy.models.base import Base, value_enum
from foodfantasy.core.constants import OrderStatus, PaymentStatus, PaymentMethod, FoodType, FoodSize
import uuid


class Order(Base):
    """One ordered line. Orders are kept as history and never deleted."""
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    user_email = Column(String, nullable=False, index=True)
    user_name = Column(String, nullable=False, default="Guest User")
    user_id = Column(String, nullable=False, default="")

    food_name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="Uncategorized")
    type = Column(value_enum(FoodType), nullable=False, default=FoodType.VEG)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    selected_size = Column(value_enum(FoodSize), nullable=True)
    image = Column(String, nullable=False, default="")

    # 0 = delivery/takeaway, 1-40 = dine-in
    table_number = Column(Integer, nullable=False, default=0)
    is_in_restaurant = Column(Boolean, nullable=False, default=True)
    chair_indices = Column(JSON, nullable=False, default=list)
    contact_number = Column(String, nullable=False, default="")

    delivery_address = Column(String, nullable=False, default="")
    delivery_latitude = Column(Float, nullable=True)
    delivery_longitude = Column(Float, nullable=True)

    status = Column(value_enum(OrderStatus), nullable=False, default=OrderStatus.ORDER, index=True)
    payment_status = Column(value_enum(PaymentStatus), nullable=False, default=PaymentStatus.UNPAID)
    payment_method = Column(value_enum(PaymentMethod), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
