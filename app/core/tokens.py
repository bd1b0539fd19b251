"""
Server-side access tokens for the LiveKit Analytics API.

LiveKit authenticates API calls with an HS256 JWT signed by the project's API
secret. The issuer is the API key and the permissions live under the `video`
grant claim. Tokens minted here are short-lived and meant to be used for a
single outbound request.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 300


class TokenError(Exception):
    """Raised when a token cannot be minted from the given credentials."""


def create_room_list_token(
    api_key: str,
    api_secret: str,
    identity: str,
    name: Optional[str] = None,
    ttl_seconds: int = DEFAULT_TTL_SECONDS,
    now: Optional[datetime] = None,
) -> str:
    """
    Mint a token granting `roomList` for the project owning `api_key`.

    Args:
        api_key: LiveKit API key, used as the `iss` claim.
        api_secret: LiveKit API secret used to sign the token.
        identity: Identity of the token holder (`sub` claim).
        name: Optional display name of the token holder.
        ttl_seconds: Token lifetime in seconds.
        now: Issue time, defaults to the current UTC time.

    Returns:
        Encoded JWT string.
    """
    if not api_key or not api_secret:
        raise TokenError("api_key and api_secret are required to mint a token")
    if ttl_seconds <= 0:
        raise TokenError("ttl_seconds must be positive")

    issued_at = now or datetime.now(timezone.utc)

    payload = {
        "iss": api_key,
        "sub": identity,
        "nbf": issued_at,
        "exp": issued_at + timedelta(seconds=ttl_seconds),
        "jti": secrets.token_urlsafe(16),
        "video": {"roomList": True},
    }
    if name:
        payload["name"] = name

    return jwt.encode(payload, api_secret, algorithm=ALGORITHM)
