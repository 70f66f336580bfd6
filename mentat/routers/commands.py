"""Command listing endpoint."""

from fastapi import APIRouter, Depends

from mentat.dependencies import get_plugin_manager
from mentat.plugins.manager import PluginManager

router = APIRouter(prefix="/api/commands", tags=["commands"])


@router.get("")
async def list_commands(manager: PluginManager = Depends(get_plugin_manager)):
    """List registered commands and the plugin owning each."""
    return manager.list_commands()
