"""
Authentication helpers for the Fresh Choice backend
Issues and validates HS256 JWT tokens and hashes passwords with bcrypt
"""
import os
from typing import Optional
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from app.core.config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: int
    email: str


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_jwt_secret() -> str:
        """Get the JWT_SECRET from environment (falls back to settings)"""
        secret = os.getenv("JWT_SECRET") or settings.JWT_SECRET
        if not secret:
            raise ValueError("JWT_SECRET environment variable is not set")
        return secret

    @staticmethod
    def get_jwt_algorithm() -> str:
        return "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: int, email: str, expires_hours: Optional[int] = None) -> str:
    """
    Sign a token for a user.

    Payload:
    {
        "userId": 1,
        "email": "admin@freshchoice.com",
        "iat": 1234567890,
        "exp": 1234654290
    }
    """
    now = datetime.now(timezone.utc)
    hours = expires_hours if expires_hours is not None else settings.JWT_EXPIRE_HOURS
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    return jwt.encode(payload, AuthConfig.get_jwt_secret(), algorithm=AuthConfig.get_jwt_algorithm())


def decode_access_token(token: str) -> dict:
    """Decode and validate a token, raising 401 on any failure"""
    try:
        return jwt.decode(
            token,
            AuthConfig.get_jwt_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()]
        )
    except JWTError as e:
        if "expired" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"}
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_access_token(credentials.credentials)

    user_id = payload.get("userId")
    email = payload.get("email")

    if user_id is None or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return TokenUser(id=user_id, email=email)
