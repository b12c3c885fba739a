"""
Pydantic schemas for request/response validation.
Request fields are optional so an absent field reaches the gateway and maps
to 400 instead of the framework's 422.
"""

from pydantic import BaseModel, ConfigDict

from services.credential_store import UserRecord


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    """Public view of a user. There is no password field to leak."""

    id: int
    username: str
    email: str

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserOut":
        return cls(**record.public_view())


class MessageResponse(BaseModel):
    """Standard error payload and the public route body."""

    message: str


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserOut


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserOut


class ProfileResponse(BaseModel):
    message: str = "Profile retrieved successfully"
    user: UserOut
