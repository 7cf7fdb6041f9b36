"""Confirmation token generation.

Tokens are bearer secrets embedded in reminder links, so they come from the
OS CSPRNG and are unrelated to row identifiers (UUIDs are generated
separately in ``models.shared``). ``nbytes`` of randomness encode to roughly
``4 * nbytes / 3`` URL-safe characters; the token column holds 64, so
``nbytes`` must stay at or below 48.
"""

import secrets

from foodcare.core.config import settings

MAX_TOKEN_BYTES = 48
MIN_TOKEN_BYTES = 16


def generate_confirmation_token(nbytes: int | None = None) -> str:
    """Return a URL-safe random token of ``nbytes`` bytes of entropy."""
    size = nbytes if nbytes is not None else settings.CONFIRMATION_TOKEN_BYTES
    if not MIN_TOKEN_BYTES <= size <= MAX_TOKEN_BYTES:
        raise ValueError(
            f"Token size must be between {MIN_TOKEN_BYTES} and {MAX_TOKEN_BYTES} bytes"
        )
    return secrets.token_urlsafe(size)


def token_hint(token: str) -> str:
    """Short, non-secret prefix of a token for log lines."""
    return f"{token[:6]}..." if token else "<empty>"
