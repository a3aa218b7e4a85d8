"""Password hashing utility using Argon2.

Provides secure password hashing and verification using the Argon2id algorithm,
which is the winner of the Password Hashing Competition and recommended by OWASP.
Every hash carries its own random salt.
"""

from functools import cached_property

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError


class PasswordHasher:
    """One-way password hashing with configurable Argon2id cost parameters."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        """Initialize the hasher.

        Args:
            time_cost: Number of Argon2 iterations.
            memory_cost: Memory usage in KiB.
            parallelism: Number of parallel lanes.
        """
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @classmethod
    def from_settings(cls, settings) -> "PasswordHasher":
        """Build a hasher from the ``argon2_*`` configuration values."""
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    def hash(self, password: str) -> str:
        """Hash a password using Argon2id.

        Args:
            password: The plaintext password to hash.

        Returns:
            The hashed password string.

        Example:
            >>> hashed = PasswordHasher().hash("secret1")
            >>> hashed.startswith("$argon2id$")
            True
        """
        return self._hasher.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Uses constant-time comparison to prevent timing attacks. Hashes that
        are malformed or were not produced by Argon2 never match.

        Args:
            password: The plaintext password to verify.
            hashed: The hashed password to verify against.

        Returns:
            True if the password matches, False otherwise.
        """
        try:
            return self._hasher.verify(hashed, password)
        except (VerificationError, InvalidHashError):
            return False

    @cached_property
    def dummy_hash(self) -> str:
        """A hash of a throwaway password at this hasher's cost.

        Verified against when an email is unknown so both sign-in failure
        paths cost the same. Computed on first use.
        """
        return self._hasher.hash("dummy_password_for_timing_safety")

    def needs_rehash(self, hashed: str) -> bool:
        """Check if a password hash was produced with outdated parameters.

        This should be called after successful password verification.
        If True, the password should be rehashed with the current parameters.
        """
        return self._hasher.check_needs_rehash(hashed)

