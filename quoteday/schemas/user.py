from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LogoutRequest(BaseModel):
    user_id: str
    session_token: Optional[str] = None


class SessionRead(BaseModel):
    success: bool = True
    user_id: str
    email: EmailStr
    name: Optional[str] = None
    is_premium: bool
    session_token: str
    expires_at: datetime
