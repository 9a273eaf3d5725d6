from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Literal

Role = Literal["participant", "admin"]

class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserPublic(BaseModel):
    id: UUID
    full_name: str
    email: EmailStr
    role: Role
    created_at: datetime

class TokenPair(BaseModel):
    access: str
    refresh: str
    user: UserPublic | None = None
