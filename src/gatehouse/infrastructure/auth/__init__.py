"""Authentication infrastructure components.

This module provides password hashing, bearer token issuance and the
client-side session slot.
"""

from gatehouse.infrastructure.auth.password_hasher import PasswordHasher
from gatehouse.infrastructure.auth.session_cache import (
    FileSessionCache,
    InMemorySessionCache,
    SessionCache,
)
from gatehouse.infrastructure.auth.token_issuer import (
    InvalidTokenError,
    TokenClaims,
    TokenError,
    TokenExpiredError,
    TokenIssuer,
)

__all__ = [
    "FileSessionCache",
    "InMemorySessionCache",
    "InvalidTokenError",
    "PasswordHasher",
    "SessionCache",
    "TokenClaims",
    "TokenError",
    "TokenExpiredError",
    "TokenIssuer",
]
