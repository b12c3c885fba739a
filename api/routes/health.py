"""
Health and readiness endpoints for load balancers and Kubernetes.
No auth required; keep payload minimal for fast checks.
"""

from fastapi import APIRouter, Response
from pydantic import BaseModel

from core.dependencies import GatewayDep, SettingsDep
from services.credential_store import CredentialStore

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Minimal health payload for probes."""

    status: str = "ok"
    service: str = "auth-service"


class ReadinessResponse(BaseModel):
    ready: bool = True
    checks: dict[str, str] = {}

    model_config = {"extra": "forbid"}


@router.get("", response_model=HealthResponse)
async def health(settings: SettingsDep) -> HealthResponse:
    """Liveness: is the process alive."""
    return HealthResponse(service=settings.APP_NAME)


@router.get("/ready", response_model=ReadinessResponse)
async def ready(gateway: GatewayDep, response: Response) -> ReadinessResponse:
    """
    Readiness: the gateway is wired to a credential store.
    The store is in-memory, so there is no external dependency to probe.
    """
    store_ok = isinstance(gateway.store, CredentialStore)
    checks: dict[str, str] = {
        "config": "loaded",
        "credential_store": "ok" if store_ok else "missing",
    }
    if not store_ok:
        response.status_code = 503
    return ReadinessResponse(ready=store_ok, checks=checks)


@router.get("/live")
async def live(response: Response) -> None:
    """Minimal live check: 200 with no body."""
    response.status_code = 200
