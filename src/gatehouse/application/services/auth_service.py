"""Sign-up, sign-in and session orchestration.

A client context is either anonymous (no valid token in its session) or
authenticated. Successful sign-up and sign-in store a fresh token in the
caller's ``SessionCache``; sign-out clears it; any check that finds the
token expired or orphaned discards it.

Every operation returns a result instead of raising. Expected failures
carry their own message; anything else is logged and reported with a
fixed "try again" message.
"""

import asyncio
from datetime import timedelta

from gatehouse.application.schemas import AuthResponse
from gatehouse.core.config import Settings, get_settings
from gatehouse.core.logging import LoggingContext, get_logger
from gatehouse.domain.entities import User, UserSummary
from gatehouse.domain.exceptions import (
    CredentialValidationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    StoreUnavailableError,
)
from gatehouse.domain.services import SignUpValidator
from gatehouse.infrastructure.auth import PasswordHasher, SessionCache, TokenIssuer
from gatehouse.infrastructure.persistence import CredentialStore, DatabaseManager

logger = get_logger(__name__)

SIGN_UP_SUCCESS = "Account created successfully! Welcome aboard!"
SIGN_IN_SUCCESS = "Welcome back! Signed in successfully."
SIGN_UP_UNEXPECTED = "An unexpected error occurred during sign up. Please try again."
SIGN_IN_UNEXPECTED = "An unexpected error occurred during sign in. Please try again."


class AuthService:
    """Orchestrates the credential store, password hasher and token issuer."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._store = store
        self._hasher = hasher
        self._issuer = issuer
        self._validator = SignUpValidator(min_password_length=settings.password_min_length)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AuthService":
        """Wire a service and its collaborators from configuration."""
        settings = settings or get_settings()
        hasher = PasswordHasher.from_settings(settings)
        db = DatabaseManager(settings.database_url, echo=settings.db_echo)
        store = CredentialStore(db, hasher, timeout_seconds=settings.store_timeout_seconds)
        issuer = TokenIssuer(
            secret_key=settings.secret_key,
            issuer=settings.token_issuer,
            expires_delta=timedelta(days=settings.token_expire_days),
        )
        return cls(store, hasher, issuer, settings=settings)

    @property
    def store(self) -> CredentialStore:
        return self._store

    async def sign_up(
        self,
        email: str,
        password: str,
        confirm_password: str,
        session: SessionCache | None = None,
    ) -> AuthResponse:
        """Register a new account and start a session for it.

        Args:
            email: Email address; must be unused in any letter case.
            password: Plaintext password.
            confirm_password: Must equal ``password``.
            session: If given, receives the issued token.

        Returns:
            AuthResponse with user and token on success.
        """
        with LoggingContext(operation="sign_up"):
            try:
                self._validator.check(email, password, confirm_password)
                email = email.strip()
                logger.info("Sign-up started", email=email)

                if await self._store.find_by_email(email) is not None:
                    raise DuplicateEmailError()

                password_hash = await asyncio.to_thread(self._hasher.hash, password)
                user = await self._store.create(email, password_hash)
                token = await self._start_session(user, session)

            except StoreUnavailableError:
                logger.exception("Sign-up failed: store unavailable")
                return AuthResponse.fail(SIGN_UP_UNEXPECTED)
            except (CredentialValidationError, DuplicateEmailError) as e:
                logger.info("Sign-up rejected", reason=e.message)
                return AuthResponse.fail(e.message)
            except Exception:
                logger.exception("Sign-up failed: unexpected error")
                return AuthResponse.fail(SIGN_UP_UNEXPECTED)

            logger.info("Sign-up successful", user_id=user.id)
            return AuthResponse.ok(SIGN_UP_SUCCESS, UserSummary.from_user(user), token)

    async def sign_in(
        self,
        email: str,
        password: str,
        session: SessionCache | None = None,
    ) -> AuthResponse:
        """Authenticate a returning user and start a session.

        Unknown email and wrong password produce the same message.
        """
        with LoggingContext(operation="sign_in"):
            try:
                if not email or not email.strip() or not password:
                    raise InvalidCredentialsError()
                email = email.strip()
                logger.info("Sign-in started", email=email)

                user = await self._store.validate(email, password)
                if user is None:
                    raise InvalidCredentialsError()

                await self._upgrade_hash_if_needed(user, password)
                token = await self._start_session(user, session)

            except StoreUnavailableError:
                logger.exception("Sign-in failed: store unavailable")
                return AuthResponse.fail(SIGN_IN_UNEXPECTED)
            except InvalidCredentialsError as e:
                logger.info("Sign-in rejected")
                return AuthResponse.fail(e.message)
            except Exception:
                logger.exception("Sign-in failed: unexpected error")
                return AuthResponse.fail(SIGN_IN_UNEXPECTED)

            logger.info("Sign-in successful", user_id=user.id)
            return AuthResponse.ok(SIGN_IN_SUCCESS, UserSummary.from_user(user), token)

    async def sign_out(self, session: SessionCache) -> None:
        """Forget the session's token. Idempotent, never raises.

        The token itself stays valid until it expires.
        """
        try:
            await session.clear()
            logger.info("User signed out")
        except Exception:
            logger.exception("Sign-out failed")

    async def get_current_user(self, session: SessionCache) -> UserSummary | None:
        """Resolve the signed-in user from the session's token.

        The identity is re-read from the credential store by id. A token that
        is invalid, expired or points at a missing user is discarded.
        """
        try:
            token = await session.get()
            if not token:
                return None

            claims = self._issuer.verify(token)
            if claims is None:
                await session.discard(token)
                logger.info("Stale session discarded")
                return None

            user = await self._store.find_by_id(claims.user_id)
            if user is None:
                await session.discard(token)
                logger.warning("Session discarded: user no longer exists", user_id=claims.user_id)
                return None

            return UserSummary.from_user(user)
        except Exception:
            logger.exception("Get current user failed")
            return None

    async def is_authenticated(self, session: SessionCache) -> bool:
        """True if the session holds a token that verifies. Does not modify the session."""
        try:
            token = await session.get()
            return self._issuer.verify(token) is not None
        except Exception:
            logger.exception("Authentication check failed")
            return False

    async def _start_session(self, user: User, session: SessionCache | None) -> str:
        token = self._issuer.issue(user.id)
        if session is None:
            return token
        try:
            await session.set(token)
        except Exception:
            # Account state is already committed, so the attempt still succeeds
            logger.exception("Session write failed", user_id=user.id)
        return token

    async def _upgrade_hash_if_needed(self, user: User, password: str) -> None:
        if not self._hasher.needs_rehash(user.password_hash):
            return
        try:
            new_hash = await asyncio.to_thread(self._hasher.hash, password)
            await self._store.update_password_hash(user.id, new_hash)
        except StoreUnavailableError:
            # The old hash still verifies; retry on the next sign-in
            logger.warning("Password rehash skipped: store unavailable", user_id=user.id)
