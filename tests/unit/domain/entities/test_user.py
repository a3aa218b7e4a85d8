"""Unit tests for the User domain entity."""
import pytest
from datetime import timezone

from gatehouse.domain.entities.user import User, UserSummary, normalize_email


def test_user_entity_creation():
    """Test creating a User entity with default timestamps."""
    user = User(id="usr_123", email="Test@Example.com", password_hash="hash")

    assert user.id == "usr_123"
    assert user.email == "Test@Example.com"
    assert user.created_at.tzinfo == timezone.utc
    assert user.updated_at.tzinfo == timezone.utc


def test_user_email_normalized():
    user = User(id="usr_123", email="  Test@Example.COM ", password_hash="hash")

    assert user.email_normalized == "test@example.com"


def test_user_repr_hides_password_hash():
    user = User(id="usr_123", email="test@example.com", password_hash="$argon2id$secret")

    assert "$argon2id$secret" not in repr(user)


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"id": "", "email": "a@b.co", "password_hash": "h"}, "User ID is required"),
        ({"id": "u1", "email": "", "password_hash": "h"}, "Email is required"),
        ({"id": "u1", "email": "a@b.co", "password_hash": ""}, "Password hash is required"),
    ],
)
def test_user_entity_validation(kwargs, message):
    """Test that missing required fields are rejected."""
    with pytest.raises(ValueError, match=message):
        User(**kwargs)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("user@example.com", "user@example.com"),
        ("USER@Example.Com", "user@example.com"),
        ("  user@example.com\t", "user@example.com"),
    ],
)
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


def test_user_summary_from_user():
    """The summary carries identity only."""
    user = User(id="usr_123", email="test@example.com", password_hash="hash")

    summary = UserSummary.from_user(user)

    assert summary == UserSummary(id="usr_123", email="test@example.com")
    assert not hasattr(summary, "password_hash")


def test_user_summary_is_immutable():
    summary = UserSummary(id="usr_123", email="test@example.com")

    with pytest.raises(AttributeError):
        summary.email = "other@example.com"
