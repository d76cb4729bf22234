"""
JWT helpers: bearer tokens carry the user id in `sub`.
"""

from datetime import timedelta
from typing import Any

import jwt

from src.core.entities.verification import utcnow
from src.core.errors import Unauthenticated


def create_access_token(
    user_id: str,
    secret: str,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(hours=1),
    audience: str = "",
) -> str:
    """Mint a signed token for `user_id`."""
    now = utcnow()
    payload: dict[str, Any] = {"sub": user_id, "iat": now, "exp": now + expires_in}
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256", audience: str = "") -> dict[str, Any]:
    """Decode and verify a token. Raises Unauthenticated on any failure."""
    try:
        if audience:
            payload = jwt.decode(token, secret, algorithms=[algorithm], audience=audience)
        else:
            payload = jwt.decode(token, secret, algorithms=[algorithm], options={"verify_aud": False})
    except jwt.ExpiredSignatureError as e:
        raise Unauthenticated("Session expired") from e
    except jwt.InvalidTokenError as e:
        raise Unauthenticated("Invalid token") from e

    if not payload.get("sub"):
        raise Unauthenticated("Invalid token")
    return payload
