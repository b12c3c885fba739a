"""
Route modules. Import and include in main app.
"""

from api.routes.auth import router as auth_router
from api.routes.health import router as health_router

__all__ = ["auth_router", "health_router"]
