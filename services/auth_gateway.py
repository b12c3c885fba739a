"""
Auth gateway: registration, login and token-gated profile access.
Synchronous and CPU-bound (bcrypt); async callers run it in an executor.
"""

from dataclasses import dataclass
from typing import Any

from core.exceptions import (
    DuplicateEmailError,
    InternalError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidPasswordError,
    MissingFieldError,
    NotFoundError,
    UnauthorizedError,
)
from core.security import PasswordHasher, TokenService
from services.credential_store import CredentialStore, UserRecord
from utils.logging import get_logger

logger = get_logger(__name__)

PUBLIC_MESSAGE = "This is a public route"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: UserRecord


class AuthGateway:
    """
    Orchestrates the credential store, password hasher and token service.
    All collaborators are injected; the gateway holds no user state itself.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(
        self,
        username: str | None,
        email: str | None,
        password: str | None,
    ) -> UserRecord:
        """
        Create a new user. Raises MissingFieldError if any field is empty and
        DuplicateEmailError if the email is already registered.
        """
        if not username or not email or not password:
            raise MissingFieldError("All fields are required")

        # Pre-check before hashing; insert re-checks under the store lock
        if self.store.find_by_email(email) is not None:
            logger.info("registration_rejected", extra={"reason": "duplicate_email"})
            raise DuplicateEmailError()

        try:
            password_hash = self.hasher.hash(password)
        except InvalidPasswordError:
            logger.info("registration_rejected", extra={"reason": "invalid_password"})
            raise
        except Exception as exc:
            logger.exception("password_hash_failed")
            raise InternalError() from exc

        user = self.store.insert(username, email, password_hash)
        logger.info("user_registered", extra={"user_id": user.id})
        return user

    def login(self, email: str | None, password: str | None) -> LoginResult:
        """
        Verify credentials and issue a token.
        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        if not email or not password:
            raise MissingFieldError("Email and password are required")

        user = self.store.find_by_email(email)
        try:
            if user is None:
                self.hasher.dummy_verify()
                valid = False
            else:
                valid = self.hasher.verify(password, user.password_hash)
        except Exception as exc:
            logger.exception("password_verify_failed")
            raise InternalError() from exc

        if not valid:
            logger.info("login_failed")
            raise InvalidCredentialsError()

        try:
            token = self.tokens.issue(user.id, user.email)
        except Exception as exc:
            logger.exception("token_issue_failed", extra={"user_id": user.id})
            raise InternalError() from exc

        logger.info("login_succeeded", extra={"user_id": user.id})
        return LoginResult(token=token, user=user)

    def get_profile(self, token: str | None) -> UserRecord:
        """Resolve the user behind a bearer token."""
        if not token:
            raise UnauthorizedError()

        try:
            subject = self.tokens.verify(token)
        except InvalidOrExpiredTokenError:
            logger.info("token_rejected")
            raise

        user = self.store.find_by_id(subject.subject_id)
        if user is None:
            logger.warning("profile_subject_missing", extra={"user_id": subject.subject_id})
            raise NotFoundError()
        return user

    def public_info(self) -> dict[str, Any]:
        return {"message": PUBLIC_MESSAGE}
