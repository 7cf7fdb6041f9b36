from sqlalchemy import Column, DateTime, String, func

from foodcare.core.database import Base
from foodcare.models.shared import UUIDType, generate_uuid


class Customer(Base):
    """Local snapshot of a storefront user, kept for reminder addressing."""

    __tablename__ = "customers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=True, index=True)
    full_name = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
