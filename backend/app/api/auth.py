"""
Authentication API endpoints
- Signup and login (rate limited per client IP)
- Current user lookup
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from psycopg2 import errors as pg_errors

from app.core.auth import (
    TokenUser,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from app.core.rate_limit import auth_rate_limit
from app.domain.user import SignupRequest, LoginRequest, UserPublic, AuthResponse
from app.repositories.user_repository import UserRepository


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


def _user_exists_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="User already exists"
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(auth_rate_limit)]
)
async def signup(body: SignupRequest):
    """Create an account and return it with a fresh token"""
    if not body.email or not body.username or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email, username, and password are required"
        )

    repo = UserRepository()
    if repo.find_by_email(body.email):
        raise _user_exists_error()

    try:
        user = repo.create(body.email, body.username, hash_password(body.password))
    except pg_errors.UniqueViolation:
        # Lost a race with a concurrent signup for the same email
        raise _user_exists_error()

    logger.info(f"User registered: {user['email']}")

    return AuthResponse(
        user=UserPublic(id=user['id'], email=user['email'], username=user['username']),
        token=create_access_token(user['id'], user['email'])
    )


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(auth_rate_limit)])
async def login(body: LoginRequest):
    if not body.email or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required"
        )

    user = UserRepository().find_by_email(body.email)
    if not user or not verify_password(body.password, user['password_hash']):
        logger.warning(f"Failed login for {body.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return AuthResponse(
        user=UserPublic(id=user['id'], email=user['email'], username=user['username']),
        token=create_access_token(user['id'], user['email'])
    )


@router.get("/me", response_model=UserPublic)
async def get_me(user: TokenUser = Depends(get_current_user)):
    """Get the account behind the current token"""
    row = UserRepository().find_by_id(user.id)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return UserPublic(id=row['id'], email=row['email'], username=row['username'])
