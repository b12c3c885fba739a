"""
Authentication API: register, login, token-gated profile and a public route.
Gateway calls hash or verify with bcrypt, so they run in the default executor
to keep the event loop free.
"""

import asyncio
from functools import partial

from fastapi import APIRouter, status

from core.dependencies import BearerToken, GatewayDep
from models.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)

router = APIRouter(prefix="/api", tags=["auth"])

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    403: {"model": MessageResponse},
    404: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={k: _ERROR_RESPONSES[k] for k in (400, 500)},
)
async def register(gateway: GatewayDep, body: RegisterRequest | None = None) -> RegisterResponse:
    """Create an account. The response never contains the password or its hash."""
    # No body at all is treated as an empty object: every field missing
    body = body or RegisterRequest()
    loop = asyncio.get_running_loop()
    user = await loop.run_in_executor(
        None,
        partial(gateway.register, body.username, body.email, body.password),
    )
    return RegisterResponse(user=UserOut.from_record(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={k: _ERROR_RESPONSES[k] for k in (400, 401, 500)},
)
async def login(gateway: GatewayDep, body: LoginRequest | None = None) -> LoginResponse:
    """Exchange email and password for a bearer token valid for 24 hours."""
    body = body or LoginRequest()
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(gateway.login, body.email, body.password),
    )
    return LoginResponse(token=result.token, user=UserOut.from_record(result.user))


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={k: _ERROR_RESPONSES[k] for k in (401, 403, 404, 500)},
)
async def profile(gateway: GatewayDep, token: BearerToken) -> ProfileResponse:
    """Profile of the user the bearer token was issued to."""
    user = gateway.get_profile(token)
    return ProfileResponse(user=UserOut.from_record(user))


@router.get("/public", response_model=MessageResponse)
async def public(gateway: GatewayDep) -> MessageResponse:
    """No authentication required."""
    return MessageResponse(**gateway.public_info())
