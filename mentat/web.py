"""FastAPI application factory for the admin surface."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mentat import __version__
from mentat.constants import AUTOLOAD_PLUGINS
from mentat.core.framework import BotFramework
from mentat.routers import commands_router, plugins_router, system_router

logger = logging.getLogger(__name__)


def create_app(framework: BotFramework, manage_lifecycle: bool = True) -> FastAPI:
    """Build the admin API around an existing framework.

    Args:
        framework: The framework whose registries the API reads and mutates
        manage_lifecycle: Start/stop the framework with the application
    """
    app = FastAPI(
        title="Mentat Bot Admin",
        description="Runtime inspection and configuration of bot plugins",
        version=__version__,
    )
    app.state.framework = framework

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(system_router)
    app.include_router(plugins_router)
    app.include_router(commands_router)

    @app.get("/")
    async def root():
        return {"message": "Mentat Bot Admin API", "docs": "/docs"}

    if manage_lifecycle:
        @app.on_event("startup")
        async def startup_event():
            logger.info("Starting Mentat bot framework")
            logger.info(f"Plugins directory: {framework.manager.plugins_dir}")
            logger.info(f"Command prefix: {framework.prefix}")
            await framework.start(autoload=AUTOLOAD_PLUGINS)
            logger.info(
                f"Loaded {framework.manager.plugins.count()} plugins "
                f"with {framework.manager.commands.count()} commands"
            )

        @app.on_event("shutdown")
        async def shutdown_event():
            await framework.stop()
            logger.info("Shut down Mentat bot framework")

    return app
