"""
Application-wide dependencies for FastAPI.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .db import get_db
from .errors import AuthenticationError
from .models import User
from .services.logging_service import user_id_var
from vidshare.shared_lib.security import decode_access_token

security = HTTPBearer(auto_error=False)

def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings

@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller as seen by the engagement services."""
    user_id: uuid.UUID
    email: Optional[str] = None
    is_admin: bool = False

async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
    settings: Settings,
) -> Optional[AuthContext]:
    if credentials is None or not credentials.credentials:
        return None

    payload = decode_access_token(credentials.credentials, settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)
    if not payload or not payload.get("sub"):
        return None

    try:
        user_uuid = uuid.UUID(str(payload["sub"]))
    except ValueError:
        return None

    user = await db.get(User, user_uuid)
    if user is None or not user.is_active:
        return None

    user_id_var.set(str(user.id))
    return AuthContext(user_id=user.id, email=user.email, is_admin=bool(user.is_admin))

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Optional[AuthContext]:
    """Caller identity when a valid bearer token is presented, otherwise ``None``."""
    return await _resolve_user(credentials, db, settings)

async def get_current_active_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> AuthContext:
    """Caller identity; rejects the request when no valid bearer token is presented."""
    if credentials is None:
        raise AuthenticationError("Access denied. No token provided.")

    context = await _resolve_user(credentials, db, settings)
    if context is None:
        raise AuthenticationError("Invalid or expired token")
    return context
