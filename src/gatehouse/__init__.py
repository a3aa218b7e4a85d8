"""Gatehouse - credential issuance and session validation.

Registers accounts, authenticates returning users, issues signed bearer
tokens and validates session state from a persisted token.
"""

__version__ = "0.1.0"

from gatehouse.application.schemas import AuthResponse, UserInfo
from gatehouse.application.services import AuthService
from gatehouse.domain.entities import User, UserSummary
from gatehouse.infrastructure.auth import (
    FileSessionCache,
    InMemorySessionCache,
    PasswordHasher,
    SessionCache,
    TokenIssuer,
)
from gatehouse.infrastructure.persistence import CredentialStore, DatabaseManager

__all__ = [
    "AuthResponse",
    "AuthService",
    "CredentialStore",
    "DatabaseManager",
    "FileSessionCache",
    "InMemorySessionCache",
    "PasswordHasher",
    "SessionCache",
    "TokenIssuer",
    "User",
    "UserInfo",
    "UserSummary",
    "__version__",
]
