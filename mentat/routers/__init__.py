"""API routers package."""

from .commands import router as commands_router
from .plugins import router as plugins_router
from .system import router as system_router

__all__ = ["commands_router", "plugins_router", "system_router"]
