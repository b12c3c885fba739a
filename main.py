"""
Application entry point. FastAPI app with middleware, routers and error mapping.
Run: python main.py  (or uvicorn main:app --port 4000)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.routes import auth_router, health_router
from core.config import get_settings
from core.exceptions import AuthError, UnauthorizedError
from core.middleware import RequestTimingMiddleware, SecureHeadersMiddleware
from core.security import build_password_hasher, build_token_service
from services.auth_gateway import AuthGateway
from services.credential_store import CredentialStore
from utils.logging import get_logger

logger = get_logger(__name__)


def build_gateway() -> AuthGateway:
    """Wire a fresh credential store, hasher and token service from settings."""
    settings = get_settings()
    return AuthGateway(
        store=CredentialStore(),
        hasher=build_password_hasher(settings),
        tokens=build_token_service(settings),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: log the listening config.
    Shutdown: the in-memory store is dropped with the process.
    """
    settings = get_settings()
    logger.info(
        "startup",
        extra={
            "app": settings.APP_NAME,
            "env": settings.ENVIRONMENT,
            "port": settings.PORT,
            "log_level": settings.LOG_LEVEL,
        },
    )
    yield
    logger.info("shutdown", extra={"app": settings.APP_NAME})


def create_app(gateway: AuthGateway | None = None) -> FastAPI:
    """Factory for FastAPI app. Pass a gateway to inject test doubles."""
    settings = get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        description="Credential-based authentication API",
        version="1.0.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.gateway = gateway or build_gateway()

    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(SecureHeadersMiddleware)

    app.include_router(health_router)
    app.include_router(auth_router)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        logger.info(
            "auth_error",
            extra={"code": exc.code, "status": exc.status_code, "path": request.url.path},
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"message": "Invalid request body", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", extra={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run(
        "main:app",
        host=s.HOST,
        port=s.PORT,
        reload=s.ENVIRONMENT == "development",
        log_level=s.LOG_LEVEL.lower(),
    )
