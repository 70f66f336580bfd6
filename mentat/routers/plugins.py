"""Plugin management REST API endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from mentat.dependencies import get_plugin_manager
from mentat.models.requests import PluginLoadRequest
from mentat.plugins.errors import InvalidPluginError, PluginHookError, PluginNotFoundError
from mentat.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plugins", tags=["plugins"])


@router.get("")
async def list_plugins(manager: PluginManager = Depends(get_plugin_manager)):
    """List active plugins."""
    return manager.list_plugins()


@router.post("/load")
async def load_plugin(body: PluginLoadRequest, manager: PluginManager = Depends(get_plugin_manager)):
    """Load (or replace) a plugin from a file in the plugins directory."""
    try:
        instance = await manager.load(body.source)
    except PluginNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPluginError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "plugin": instance.to_dict()}


@router.get("/{name}")
async def get_plugin(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Get detailed information about one plugin."""
    try:
        return manager.get_plugin_info(name)
    except PluginNotFoundError:
        raise HTTPException(status_code=404, detail="Plugin not found")


@router.delete("/{name}")
async def unload_plugin(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Unload a plugin and remove its commands and listeners."""
    if not await manager.unload(name):
        raise HTTPException(status_code=404, detail="Plugin not found")
    return {"success": True, "name": name}


@router.post("/{name}/reload")
async def reload_plugin(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Hot-reload a plugin from its source file."""
    try:
        instance = await manager.reload(name)
    except PluginNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPluginError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "plugin": instance.to_dict()}


@router.post("/{name}/toggle")
async def toggle_plugin(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Flip a plugin's enabled flag. Disabled plugins' commands are not dispatched."""
    try:
        enabled = manager.toggle(name)
    except PluginNotFoundError:
        raise HTTPException(status_code=404, detail="Plugin not found")
    return {"enabled": enabled, "name": name}


@router.get("/{name}/config")
async def get_plugin_config(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Get a plugin's configuration mapping."""
    try:
        return manager.get_plugin_config(name)
    except PluginNotFoundError:
        raise HTTPException(status_code=404, detail="Plugin not found")


@router.post("/{name}/config")
async def update_plugin_config(
    name: str,
    values: Dict[str, Any] = Body(...),
    manager: PluginManager = Depends(get_plugin_manager),
):
    """Merge values into a plugin's configuration and persist it."""
    try:
        config = await manager.update_plugin_config(name, values)
    except PluginNotFoundError:
        raise HTTPException(status_code=404, detail="Plugin not found")
    except PluginHookError as e:
        logger.error(f"Plugin config update failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save plugin config: {e.cause}")
    return {"success": True, "config": config}
