"""Password hashing and identity tokens.

PasswordHasher wraps passlib's bcrypt context with a fixed cost factor.

TokenIssuer is the only object that reads the signing secret. Tokens are
HS256 JWTs carrying ``{"user": {"id": ...}}`` plus ``iat``/``exp`` claims and
are verified without any server-side lookup, so a token stays valid until it
expires. Handlers only receive the issuer through ``get_token_issuer``.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from src.config import Settings


class TokenError(Exception):
    """Token could not be verified."""


class MalformedTokenError(TokenError):
    """Token is not a JWT or its claims have the wrong shape."""


class InvalidSignatureError(TokenError):
    """Token signature does not verify against the current secret."""


class TokenExpiredError(TokenError):
    """Token lifetime has elapsed."""


class PasswordHasher:
    """One-way salted password hashing."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, password: str) -> bool:
        """Spend one verification on a throwaway hash.

        Called when there is no stored hash to check, so a failed login takes
        the same time whether or not the account exists.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("postboard-timing-dummy")
        self.verify(password, self._dummy_hash)
        return False


class TokenIssuer:
    """Issue and verify signed, time-bounded identity tokens."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] | None = None) -> None:
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._lifetime = timedelta(hours=settings.jwt_expiration_hours)
        self._clock = clock or (lambda: datetime.now(UTC))

    def _now(self) -> datetime:
        # JWT NumericDate claims are whole seconds
        return self._clock().replace(microsecond=0)

    def issue(self, user_id: int) -> str:
        """Create a token for ``user_id`` that expires after the configured lifetime."""
        issued_at = self._now()
        claims = {
            "user": {"id": user_id},
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._lifetime).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """Return the user id embedded in ``token``.

        Raises MalformedTokenError, InvalidSignatureError or TokenExpiredError.
        A token is valid while ``now < exp``.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedTokenError(str(e)) from e

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as e:
            raise MalformedTokenError(str(e)) from e
        except JWTError as e:
            raise InvalidSignatureError(str(e)) from e

        expires_at = claims.get("exp")
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise MalformedTokenError("Token has no expiration")

        user = claims.get("user")
        user_id = user.get("id") if isinstance(user, dict) else None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise MalformedTokenError("Token has no user id")

        if self._now().timestamp() >= expires_at:
            raise TokenExpiredError("Token has expired")

        return user_id
