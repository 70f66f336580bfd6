"""Request-scoped access to the framework owned by the FastAPI app."""

import logging

from fastapi import Request

from mentat.core.framework import BotFramework
from mentat.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def get_framework(request: Request) -> BotFramework:
    """The framework instance attached by ``create_app``."""
    return request.app.state.framework


def get_plugin_manager(request: Request) -> PluginManager:
    return get_framework(request).manager
