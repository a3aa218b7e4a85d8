"""Repositories for database access."""

from gatehouse.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = ["UserRepository"]
