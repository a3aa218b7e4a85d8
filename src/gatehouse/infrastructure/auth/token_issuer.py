"""Bearer token issuance and verification.

Tokens are HS256-signed JWTs whose payload is ``{userId, exp, iat, iss}``.
``exp`` and ``iat`` are epoch milliseconds. Expiry is checked against an
injectable clock rather than by PyJWT so it can be driven from tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gatehouse.core.config import get_settings
from gatehouse.core.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class TokenError(Exception):
    """Base exception for token-related errors."""

    pass


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, tampered with or foreign."""

    pass


class TokenClaims(BaseModel):
    """Decoded contents of a bearer token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    expires_at_ms: int = Field(..., alias="exp")

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.expires_at_ms / 1000, tz=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class TokenIssuer:
    """Creates and validates expiring bearer tokens bound to a user id."""

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str | None = None,
        issuer: str | None = None,
        expires_delta: timedelta | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the token issuer.

        Args:
            secret_key: Key for signing tokens. Defaults to the configured key.
            issuer: ``iss`` claim. Defaults to the configured issuer.
            expires_delta: Token lifetime. Defaults to ``token_expire_days``.
            clock: Returns the current aware datetime. Defaults to UTC now.
        """
        if not (secret_key and issuer and expires_delta):
            settings = get_settings()
            secret_key = secret_key or settings.secret_key
            issuer = issuer or settings.token_issuer
            expires_delta = expires_delta or timedelta(days=settings.token_expire_days)
        self._secret_key = secret_key
        self.issuer = issuer
        self.expires_delta = expires_delta
        self._clock = clock or _utcnow

    def issue(self, user_id: str) -> str:
        """Create a signed token for ``user_id``.

        Args:
            user_id: The user's unique identifier.

        Returns:
            Encoded token string.
        """
        if not user_id:
            raise ValueError("user_id is required")

        now = self._clock()
        payload = {
            "iss": self.issuer,
            "userId": user_id,
            "iat": _to_millis(now),
            "exp": _to_millis(now + self.expires_delta),
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        logger.debug("Token issued", user_id=user_id)
        return token

    def decode(self, token: str) -> TokenClaims:
        """Decode and validate a token.

        Args:
            token: The encoded token.

        Returns:
            Decoded claims.

        Raises:
            TokenExpiredError: If ``exp`` is at or before the current time.
            InvalidTokenError: If the token is malformed, unsigned, signed with
                another key, from another issuer or missing claims.
        """
        if not token:
            raise InvalidTokenError("Empty token")

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                # exp is in milliseconds and checked below against our clock
                options={"verify_exp": False, "verify_iat": False, "require": ["iss"]},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Invalid token payload") from e

        if claims.expires_at_ms <= _to_millis(self._clock()):
            raise TokenExpiredError("Token has expired")

        return claims

    def verify(self, token: str | None) -> TokenClaims | None:
        """Validate a token without raising.

        Returns:
            The claims, or None if the token is absent, invalid or expired.
        """
        if not token:
            return None
        try:
            return self.decode(token)
        except TokenExpiredError:
            logger.info("Token rejected: expired")
            return None
        except InvalidTokenError as e:
            logger.info("Token rejected: invalid", reason=str(e))
            return None
