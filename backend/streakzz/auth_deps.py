from __future__ import annotations
import uuid
import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from streakzz.db import get_session
from streakzz.security import decode_token
from streakzz.models.user import User
from streakzz.services.scheduler import CleanupScheduler

security = HTTPBearer()

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    try:
        data = decode_token(credentials.credentials, expected_type="access")
        user_id = uuid.UUID(str(data.get("sub")))
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = await session.get(User, user_id)
    if not user or user.is_deleted:
        raise HTTPException(status_code=401, detail="User not found")
    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return user

def get_scheduler(request: Request) -> CleanupScheduler:
    return request.app.state.cleanup_scheduler
