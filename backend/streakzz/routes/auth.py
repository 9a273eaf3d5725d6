from __future__ import annotations
import uuid
import jwt
import structlog
from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from streakzz.auth_deps import get_current_user
from streakzz.config import settings
from streakzz.db import get_session
from streakzz.models.user import User
from streakzz.schemas.auth import RegisterRequest, LoginRequest, UserPublic, TokenPair
from streakzz.security import hash_password, verify_password, make_access_token, make_refresh_token, decode_token

router = APIRouter(prefix="/auth", tags=["auth"])
log = structlog.get_logger()

def _public(user: User) -> UserPublic:
    return UserPublic(id=user.id, full_name=user.full_name, email=user.email, role=user.role, created_at=user.created_at)

def _tokens(user: User) -> TokenPair:
    return TokenPair(
        access=make_access_token(str(user.id), user.role),
        refresh=make_refresh_token(str(user.id)),
        user=_public(user),
    )

@router.post("/register", status_code=201, response_model=TokenPair)
async def register(payload: RegisterRequest, session: AsyncSession = Depends(get_session)):
    email = payload.email.lower()
    exists = await session.scalar(select(User).where(User.email == email))
    if exists:
        raise HTTPException(status_code=409, detail="Email already registered")
    role = "admin" if email in settings.admin_emails else "participant"
    user = User(full_name=payload.full_name.strip(), email=email, password_hash=hash_password(payload.password), role=role)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    await session.refresh(user)
    log.info("user_registered", user_id=str(user.id), role=role)
    return _tokens(user)

@router.post("/login", response_model=TokenPair)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    user = await session.scalar(select(User).where(User.email == payload.email.lower(), User.is_deleted.is_(False)))
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _tokens(user)

@router.post("/refresh", response_model=TokenPair)
async def refresh(authorization: str | None = Header(None), session: AsyncSession = Depends(get_session)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing refresh token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token, expected_type="refresh")
        user = await session.get(User, uuid.UUID(str(data.get("sub"))))
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    if not user or user.is_deleted:
        raise HTTPException(status_code=401, detail="User not found")
    return _tokens(user)

@router.get("/me", response_model=UserPublic)
async def me(user: User = Depends(get_current_user)):
    return _public(user)

@router.delete("/account")
async def delete_account(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    # Soft delete; projects stay for history
    user.is_deleted = True
    await session.commit()
    log.info("user_soft_deleted", user_id=str(user.id), source="self")
    return {"message": "Account deleted successfully"}
