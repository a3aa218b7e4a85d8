"""Response schemas returned by the auth service."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gatehouse.domain.entities import UserSummary


class UserInfo(BaseModel):
    """Public identity of a user."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    email: str

    @classmethod
    def from_summary(cls, summary: UserSummary) -> "UserInfo":
        return cls.model_validate(summary)


class AuthResponse(BaseModel):
    """Uniform result of every sign-up and sign-in attempt."""

    success: bool
    message: str
    user: UserInfo | None = None
    token: str | None = Field(default=None, repr=False)

    @classmethod
    def ok(cls, message: str, user: UserSummary, token: str) -> "AuthResponse":
        return cls(success=True, message=message, user=UserInfo.from_summary(user), token=token)

    @classmethod
    def fail(cls, message: str) -> "AuthResponse":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting ``user`` and ``token`` when absent."""
        return self.model_dump(exclude_none=True)
