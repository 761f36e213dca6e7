from sqlalchemy import Column, String, Boolean, DateTime
from datetime import datetime
from foodfantasy.models.base import Base
import uuid


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, nullable=False, unique=True)  # always lowercase + trimmed
    is_super_admin = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, nullable=False, default="system")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
