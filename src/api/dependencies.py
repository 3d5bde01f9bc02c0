"""FastAPI dependencies for authentication."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from src.config import get_settings
from src.errors import UnauthorizedError
from src.services.security import PasswordHasher, TokenError, TokenIssuer

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"

token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get the process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Get the process-wide token issuer."""
    return TokenIssuer(get_settings())


def get_current_user_id(
    request: Request,
    token: Annotated[str | None, Depends(token_header)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> int:
    """Resolve the identity token on the request to a user id.

    Runs before the route handler; a rejected request never reaches it.
    """
    if not token:
        raise UnauthorizedError("No token, authorization denied")

    try:
        user_id = issuer.verify(token)
    except TokenError as e:
        logger.debug(f"Rejected token on {request.url.path}: {type(e).__name__}")
        raise UnauthorizedError("Token is not valid") from e

    request.state.user_id = user_id
    return user_id
