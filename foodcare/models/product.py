from sqlalchemy import Column, DateTime, Numeric, String, func

from foodcare.core.database import Base
from foodcare.models.shared import UUIDType, generate_uuid


class Product(Base):
    """Local snapshot of a catalog product, kept for reminder content."""

    __tablename__ = "products"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    base_price = Column(Numeric(12, 2), nullable=False, default=0)
    image_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
