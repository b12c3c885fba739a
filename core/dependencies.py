"""
FastAPI dependency injection: settings, the auth gateway, bearer credentials.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from services.auth_gateway import AuthGateway

SettingsDep = Annotated[Settings, Depends(get_settings)]

security_scheme = HTTPBearer(auto_error=False)


def get_gateway(request: Request) -> AuthGateway:
    """The gateway built by create_app for this application instance."""
    return request.app.state.gateway


async def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
) -> str | None:
    """
    Raw token from "Authorization: Bearer <token>", or None.
    Verification is left to the gateway so that a missing token (401) and a
    bad one (403) stay distinguishable.
    """
    if not credentials:
        return None
    return credentials.credentials or None


GatewayDep = Annotated[AuthGateway, Depends(get_gateway)]
BearerToken = Annotated[str | None, Depends(get_bearer_token)]
