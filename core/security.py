"""
Security primitives: bcrypt password hashing and signed bearer tokens.
Both are plain objects configured once at startup and injected into the gateway.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from core.config import Settings
from core.exceptions import InvalidOrExpiredTokenError, InvalidPasswordError


class PasswordHasher:
    """
    Salted one-way hashing. bcrypt embeds a per-call salt in its output, so
    hashing the same plaintext twice gives different strings.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        """Raises InvalidPasswordError for input bcrypt cannot take (NUL bytes)."""
        try:
            return self._context.hash(plaintext)
        except PasswordValueError as exc:
            raise InvalidPasswordError() from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Constant-time check of plaintext against a stored hash."""
        try:
            return self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            # Unrecognised or malformed hash string
            return False

    def dummy_verify(self) -> None:
        """Spend one verify's worth of time; used when there is no stored hash to check."""
        self._context.dummy_verify()


@dataclass(frozen=True)
class TokenSubject:
    """Identity carried by a verified token."""

    subject_id: int
    subject_email: str


class TokenService:
    """Issues and verifies HMAC-signed JWTs bound to a user id and email."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject_id: int, subject_email: str) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "email": subject_email,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenSubject:
        """
        Return the embedded identity.
        Raises InvalidOrExpiredTokenError on bad signature, malformed payload or expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as exc:
            raise InvalidOrExpiredTokenError() from exc

        # jose accepts a token for the whole second in which now == exp
        if payload["exp"] <= int(datetime.now(UTC).timestamp()):
            raise InvalidOrExpiredTokenError()

        sub = payload.get("sub")
        email = payload.get("email")
        if not isinstance(sub, str) or not sub.isdigit() or not isinstance(email, str):
            raise InvalidOrExpiredTokenError()
        return TokenSubject(subject_id=int(sub), subject_email=email)


def build_password_hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def build_token_service(settings: Settings) -> TokenService:
    return TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(hours=settings.JWT_EXPIRE_HOURS),
    )
