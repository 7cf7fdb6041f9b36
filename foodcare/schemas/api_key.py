from datetime import datetime

from pydantic import Field

from foodcare.schemas.shared import ApiModel


class ApiKeyCreate(ApiModel):
    """Input for minting an admin key; ``expires_at`` of ``None`` never expires."""

    name: str | None = Field(default=None, max_length=255)
    expires_at: datetime | None = None
