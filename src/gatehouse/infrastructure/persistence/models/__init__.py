"""SQLAlchemy ORM models for Gatehouse."""

from gatehouse.infrastructure.persistence.models.user import UserModel

__all__ = ["UserModel"]
