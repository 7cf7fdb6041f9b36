from sqlalchemy import Column, DateTime, String, func

from foodcare.core.database import Base
from foodcare.models.shared import UUIDType, generate_uuid


class ApiKey(Base):
    """Admin credential; only the SHA-256 hash of the raw key is stored."""

    __tablename__ = "api_keys"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    key_hash = Column(String(255), nullable=False, unique=True, index=True)
    key_prefix = Column(String(20), nullable=False)
    name = Column(String(255), nullable=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(50), nullable=False, default="active")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
