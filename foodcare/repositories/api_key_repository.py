import hashlib
import secrets
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.api_key import ApiKey
from foodcare.schemas.api_key import ApiKeyCreate


def generate_api_key() -> str:
    """Generate a random admin API key with 'fc_' prefix."""
    return "fc_" + secrets.token_hex(32)


def hash_api_key(raw_key: str) -> str:
    """SHA-256 hash of the raw API key."""
    return hashlib.sha256(raw_key.encode()).hexdigest()


class ApiKeyRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, data: ApiKeyCreate) -> tuple[ApiKey, str]:
        """Create a new admin API key. Returns (api_key_model, raw_key)."""
        raw_key = generate_api_key()
        api_key = ApiKey(
            key_hash=hash_api_key(raw_key),
            key_prefix=raw_key[:12],
            name=data.name,
            expires_at=data.expires_at,
        )
        self.db.add(api_key)
        self.db.commit()
        self.db.refresh(api_key)
        return api_key, raw_key

    def get_by_hash(self, key_hash: str) -> ApiKey | None:
        return self.db.query(ApiKey).filter(ApiKey.key_hash == key_hash).first()

    def get_by_id(self, api_key_id: UUID) -> ApiKey | None:
        return self.db.query(ApiKey).filter(ApiKey.id == api_key_id).first()

    def update_last_used(self, api_key: ApiKey, used_at: datetime) -> None:
        api_key.last_used_at = used_at  # type: ignore[assignment]
        self.db.commit()

    def revoke(self, api_key_id: UUID) -> ApiKey | None:
        api_key = self.get_by_id(api_key_id)
        if not api_key:
            return None
        api_key.status = "revoked"  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(api_key)
        return api_key
