"""Password hashing and JWT issuing/verification for authentication."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Protocol

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# bcrypt only uses the first 72 bytes of the input.
BCRYPT_MAX_BYTES = 72

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenSubject(Protocol):
    """Anything with an id and email can be issued tokens (the User model)."""

    id: Any
    email: Any


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenIssuer:
    """
    Mints and verifies the access/refresh token pair.

    Access tokens carry sub (user id), email, type and a random jti; refresh
    tokens carry only sub, type and jti. Each kind has its own secret and lifetime.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expire_minutes: int,
        refresh_expire_minutes: int,
        algorithm: str = "HS256",
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_expire = timedelta(minutes=access_expire_minutes)
        self.refresh_expire = timedelta(minutes=refresh_expire_minutes)
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenIssuer":
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET.get_secret_value(),
            refresh_secret=settings.REFRESH_TOKEN_SECRET.get_secret_value(),
            access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            refresh_expire_minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES,
            algorithm=settings.JWT_ALGORITHM,
        )

    def generate_access_token(self, user: TokenSubject) -> str:
        """Create a signed access token with sub, email, type, iat and exp."""
        return self._encode(
            {"sub": str(user.id), "email": user.email},
            ACCESS_TOKEN_TYPE,
            self._access_secret,
            self.access_expire,
        )

    def generate_refresh_token(self, user: TokenSubject) -> str:
        """Create a signed refresh token with sub, type, iat and exp."""
        return self._encode(
            {"sub": str(user.id)},
            REFRESH_TOKEN_TYPE,
            self._refresh_secret,
            self.refresh_expire,
        )

    def decode_access_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token; return its payload.
        Raises jwt.PyJWTError on invalid, expired or wrong-type tokens.
        """
        return self._decode(token, ACCESS_TOKEN_TYPE, self._access_secret)

    def decode_refresh_token(self, token: str) -> dict[str, Any]:
        """Same as decode_access_token, for refresh tokens."""
        return self._decode(token, REFRESH_TOKEN_TYPE, self._refresh_secret)

    def _encode(
        self,
        claims: dict[str, Any],
        token_type: str,
        secret: str,
        lifetime: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims,
            "type": token_type,
            # Unique per token; iat alone repeats within the same second.
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + lifetime,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str, secret: str) -> dict[str, Any]:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp", "iat", "jti"]},
        )
        if payload.get("type") != token_type:
            raise jwt.InvalidTokenError(f"Expected a {token_type} token")
        return payload
