"""
User Domain Model
"""
from pydantic import BaseModel
from typing import Optional


class SignupRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    """User fields safe to return to the client"""
    id: int
    email: str
    username: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
