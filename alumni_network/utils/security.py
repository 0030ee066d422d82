from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    if not secret:
        raise RuntimeError("JWT secret is not configured")
    to_encode = dict(claims)
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode["exp"] = int(expire.timestamp())
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    # raises jose.JWTError on a bad signature or an expired token
    return jwt.decode(token, secret, algorithms=[algorithm])
