"""Security utilities."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(
    data: dict,
    secret_key: str,
    algorithm: str = ALGORITHM,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = ALGORITHM) -> Dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        jose.JWTError: If the signature is invalid or the token expired
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])


def user_id_from_claims(claims: Dict[str, Any]) -> Optional[str]:
    """Opaque user identifier carried by the token, if any."""
    user_id = claims.get("user_id") or claims.get("sub")
    return str(user_id) if user_id else None
