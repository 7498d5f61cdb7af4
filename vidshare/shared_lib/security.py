"""
Access token helpers.

Tokens are issued by the authentication service; this module only needs to
read them, plus mint them for scripts and tests.
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import jwt


def create_access_token(
    user_id: str,
    secret_key: str,
    email: Optional[str] = None,
    is_admin: bool = False,
    expires_minutes: int = 60 * 24 * 7,
    algorithm: str = "HS256",
) -> str:
    """Create a signed JWT access token for a user."""
    now = datetime.utcnow()
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    if email:
        payload["email"] = email
    if is_admin:
        payload["is_admin"] = True
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> Optional[Dict[str, Any]]:
    """Decode a JWT access token, returning ``None`` when it is invalid or expired."""
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.PyJWTError:
        return None
