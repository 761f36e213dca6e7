from sqlalchemy import Column, String, Float, Boolean, DateTime
from datetime import datetime
from foodfantasy.models.base import Base, value_enum
from foodfantasy.core.constants import FoodType
import uuid


class Food(Base):
    __tablename__ = "foods"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    type = Column(
        value_enum(FoodType),
        nullable=False,
        index=True,
    )
    price = Column(Float, nullable=False)
    image = Column(String, nullable=True)  # public URL or object-storage key
    available = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
