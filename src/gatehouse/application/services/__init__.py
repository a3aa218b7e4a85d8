"""Application services for Gatehouse."""

from gatehouse.application.services.auth_service import AuthService

__all__ = ["AuthService"]
