"""Persistence layer: database engine, ORM models, repositories and the credential store."""

from gatehouse.infrastructure.persistence.credential_store import CredentialStore
from gatehouse.infrastructure.persistence.database import Base, DatabaseManager

__all__ = [
    "Base",
    "CredentialStore",
    "DatabaseManager",
]
