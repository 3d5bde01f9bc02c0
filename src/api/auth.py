"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id, get_password_hasher, get_token_issuer
from src.database import get_db
from src.errors import InvalidCredentialsError, ServerError
from src.schemas.auth import TokenResponse, UserLogin, UserRegister, UserResponse
from src.services.auth import authenticate_user, create_user, get_user_by_id
from src.services.security import PasswordHasher, TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/users", response_model=TokenResponse)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
):
    """Register a new user and return a token for them."""
    user = create_user(db, hasher, user_data.name, user_data.email, user_data.password)
    return TokenResponse(token=issuer.issue(user.id))


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
):
    """Login with email and password."""
    user = authenticate_user(db, hasher, credentials.email, credentials.password)

    if not user:
        logger.info("Failed login attempt")
        raise InvalidCredentialsError()

    return TokenResponse(token=issuer.issue(user.id))


@router.get("/auth", response_model=UserResponse)
async def get_me(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the authenticated user's profile."""
    user = get_user_by_id(db, user_id)
    if user is None:
        # Tokens are only issued for existing users
        logger.error(f"Token subject {user_id} does not resolve to a user")
        raise ServerError()
    return user
