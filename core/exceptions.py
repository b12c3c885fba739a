"""
Authentication error taxonomy.
Each error carries the HTTP status and the client-safe message it maps to;
the app-level handler in main.py renders them as {"message": ...}.
"""


class AuthError(Exception):
    """Base for expected authentication failures."""

    status_code: int = 500
    message: str = "Internal server error"
    code: str = "internal"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MissingFieldError(AuthError):
    status_code = 400
    message = "All fields are required"
    code = "missing_field"


class DuplicateEmailError(AuthError):
    status_code = 400
    message = "User already exists"
    code = "duplicate_email"


class InvalidPasswordError(AuthError):
    status_code = 400
    message = "Password contains unsupported characters"
    code = "invalid_password"


class InvalidCredentialsError(AuthError):
    """Raised for unknown email and wrong password alike."""

    status_code = 401
    message = "Invalid credentials"
    code = "invalid_credentials"


class UnauthorizedError(AuthError):
    status_code = 401
    message = "Access token required"
    code = "unauthorized"


class InvalidOrExpiredTokenError(AuthError):
    status_code = 403
    message = "Invalid or expired token"
    code = "invalid_token"


class NotFoundError(AuthError):
    status_code = 404
    message = "User not found"
    code = "not_found"


class InternalError(AuthError):
    """Unexpected failure; message never carries internal detail."""
